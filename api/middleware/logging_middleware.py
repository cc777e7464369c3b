"""
Logging Middleware - API Layer

One structured access-log record per request: method, path, status,
duration, client address, request id and, once the auth dependency has
run, the caller's user id.

An incoming X-Request-ID is reused; otherwise a fresh UUID is minted.
Either way it is echoed back on the response.
"""
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger("api.access")

# Probes and docs are not access-logged
_SKIP_PATHS = {"/api/health", "/api/health/db", "/docs", "/redoc", "/openapi.json"}


class LoggingMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start_time = time.monotonic()
        request.state.request_id = request_id

        response: Response = await call_next(request)

        duration_ms = round((time.monotonic() - start_time) * 1000, 2)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        if request.url.path not in _SKIP_PATHS:
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                "%s %s -> %d",
                request.method, request.url.path, response.status_code,
                extra={
                    "structured_context": {
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "duration_ms": duration_ms,
                        "client_ip": _get_client_ip(request),
                        "request_id": request_id,
                        "user_id": getattr(request.state, "user_id", None),
                    }
                },
            )

        return response


def _get_client_ip(request: Request) -> str:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"
