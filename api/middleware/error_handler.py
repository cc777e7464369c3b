"""
Error Handler - API Layer

Maps domain exceptions and request validation errors onto the response
envelope ``{"success": false, "message": ...}``. Routers never catch
domain exceptions themselves.

HTTP status mapping:
  ValidationFailedError    → 400 Bad Request (with "errors")
  RequestValidationError   → 400 Bad Request (with "errors")
  DuplicateEntityError     → 400 Bad Request
  UnauthenticatedError     → 401 Unauthorized
  EntityNotFoundError      → 404 Not Found (roadmap, step, user)
  BusinessRuleViolation    → 409 Conflict
  CircularDependencyError  → 409 Conflict
  other DomainError        → 400 Bad Request
  Unhandled Exception      → 500 Internal Server Error (with correlationId)
"""
import logging
import traceback
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from domain.exceptions.domain_exceptions import (
    BusinessRuleViolation,
    CircularDependencyError,
    DomainError,
    DuplicateEntityError,
    EntityNotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


def _error_body(message: str, **extra) -> dict:
    payload = {"success": False, "message": message}
    payload.update({k: v for k, v in extra.items() if v is not None})
    return payload


def _field_name(loc) -> str:
    # ("body", "hoursPerWeek") → "hoursPerWeek"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or ".".join(str(p) for p in loc)


def add_error_handlers(app: FastAPI) -> None:
    """Register all domain and system exception handlers on the app."""

    # ------------------------------------------------------------------ #
    # 1. Request body / query validation
    # ------------------------------------------------------------------ #

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": _field_name(err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Validation failed", errors=errors),
        )

    # ------------------------------------------------------------------ #
    # 2. Domain exceptions (specific → general order)
    # ------------------------------------------------------------------ #

    @app.exception_handler(ValidationFailedError)
    async def domain_validation_handler(request: Request, exc: ValidationFailedError):
        errors = [{"field": f, "message": m} for f, m in exc.errors.items()]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(exc.message, errors=errors),
        )

    @app.exception_handler(UnauthenticatedError)
    async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=_error_body(exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(EntityNotFoundError)
    async def not_found_handler(request: Request, exc: EntityNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(exc.message),
        )

    @app.exception_handler(DuplicateEntityError)
    async def duplicate_handler(request: Request, exc: DuplicateEntityError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(exc.message),
        )

    @app.exception_handler(CircularDependencyError)
    async def circular_dep_handler(request: Request, exc: CircularDependencyError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body(exc.message, cycle=exc.cycle),
        )

    @app.exception_handler(BusinessRuleViolation)
    async def business_rule_handler(request: Request, exc: BusinessRuleViolation):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body(exc.message, rule=exc.rule),
        )

    # Catch-all for any remaining DomainError subclasses
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(exc.message),
        )

    # ------------------------------------------------------------------ #
    # 3. Unhandled exceptions → 500
    # ------------------------------------------------------------------ #

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        correlation_id = str(uuid.uuid4())
        logger.error(
            "Unhandled exception [%s]: %s\n%s",
            correlation_id, exc, traceback.format_exc(),
            extra={"structured_context": {
                "correlation_id": correlation_id,
                "path": request.url.path,
                "request_id": getattr(request.state, "request_id", None),
            }},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Server error", correlationId=correlation_id),
        )
