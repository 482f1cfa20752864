"""FastAPI middleware for observability and request tracking."""
import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from issuetrack.utils.observability import (
    correlation_context,
    generate_correlation_id,
    record_http_duration,
    record_http_request,
    sanitize_endpoint,
)

logger = logging.getLogger(__name__)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """
    Correlation ids and HTTP metrics for every request.

    The caller's correlation header is reused when present and echoed on
    the response; failures are logged with the traceback and re-raised for
    the application's exception handlers.
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = "X-Correlation-ID",
        record_metrics: bool = True,
    ):
        super().__init__(app)
        self.header_name = header_name
        self.record_metrics = record_metrics

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(self.header_name) or generate_correlation_id()

        with correlation_context(correlation_id):
            started = time.perf_counter()
            context = {"method": request.method, "path": request.url.path}
            status_code = 500
            try:
                response = await call_next(request)
                status_code = response.status_code
            except Exception:
                logger.error("Request failed", extra=context, exc_info=True)
                raise
            finally:
                elapsed = time.perf_counter() - started
                if self.record_metrics:
                    self._observe(request.method, request.url.path, status_code, elapsed)

            logger.info(
                "Request completed",
                extra={**context, "status_code": status_code, "duration_ms": round(elapsed * 1000, 2)},
            )
            response.headers[self.header_name] = correlation_id
            return response

    @staticmethod
    def _observe(method: str, path: str, status_code: int, elapsed: float) -> None:
        endpoint = sanitize_endpoint(path)
        record_http_request(method, endpoint, status_code)
        record_http_duration(method, endpoint, elapsed)
