"""
Performance Middleware - API Layer

Adds X-Process-Time to every response and warns about requests slower
than the configured threshold. Roadmap creation waits on the language
model, so it is the usual offender.
"""
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger("api.performance")

DEFAULT_SLOW_THRESHOLD_MS = 2000.0


class PerformanceMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, slow_threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS) -> None:
        super().__init__(app)
        self.slow_threshold_ms = slow_threshold_ms
        self.slow_request_count = 0

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.monotonic()
        response: Response = await call_next(request)
        elapsed_ms = round((time.monotonic() - start) * 1000, 2)

        response.headers["X-Process-Time"] = f"{elapsed_ms}ms"

        if elapsed_ms > self.slow_threshold_ms:
            self.slow_request_count += 1
            logger.warning(
                "Slow request: %s %s took %.0fms",
                request.method, request.url.path, elapsed_ms,
                extra={
                    "structured_context": {
                        "duration_ms": elapsed_ms,
                        "threshold_ms": self.slow_threshold_ms,
                        "slow_requests_total": self.slow_request_count,
                        "request_id": getattr(request.state, "request_id", None),
                    }
                },
            )

        return response
