"""
Common Schemas - API Layer
Success envelope shared by every endpoint. Failures use the same shape
with ``success: false`` (see api/middleware/error_handler.py).
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """
    Envelope: {"success": bool, "message": str, "data": {...}}
    ``data`` is null for operations that return nothing.
    """
    success: bool = Field(default=True, description="Operation success indicator")
    message: str = Field(..., description="Human-readable outcome")
    data: Optional[Dict[str, Any]] = Field(None, description="Payload")


def ok(message: str, **data: Any) -> ApiResponse:
    return ApiResponse(success=True, message=message, data=data or None)
