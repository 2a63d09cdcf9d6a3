"""
Request logging, metrics and security header middleware.

``RequestLoggingMiddleware`` assigns each request a correlation ID (taken from
``X-Correlation-ID`` when the client sends one), binds it to the structlog
context, records Prometheus request metrics and echoes the ID back on the
response.
"""

import time
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shared.logging import bind_context, clear_context
from shared.metrics import ApiMetrics

logger = structlog.get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics."""

    def __init__(self, app, metrics: ApiMetrics, skip_paths=("/health", "/metrics")):
        super().__init__(app)
        self.metrics = metrics
        self.skip_paths = tuple(skip_paths)

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())

        method = request.method
        path = request.url.path
        quiet = path.startswith(self.skip_paths)

        clear_context()
        bind_context(correlation_id=correlation_id)

        self.metrics.http_requests_in_progress.labels(method=method).inc()
        start_time = time.perf_counter()

        if not quiet:
            logger.info(
                "request_started",
                method=method,
                path=path,
                client_ip=request.client.host if request.client else "unknown"
            )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{duration:.3f}s",
                exc_info=True
            )
            raise
        finally:
            self.metrics.http_requests_in_progress.labels(method=method).dec()

        duration = time.perf_counter() - start_time
        endpoint = self._endpoint_label(request)

        self.metrics.http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status=response.status_code
        ).inc()
        self.metrics.http_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

        if not quiet:
            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration=f"{duration:.3f}s"
            )

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response

    @staticmethod
    def _endpoint_label(request: Request) -> str:
        """
        Full route template (``/api/v2/beer/{beer_id}``) or ``unmatched``.

        Depending on the framework version the matched route's path may or
        may not include the router prefixes, so the template only replaces
        the trailing segments of the request path it covers.
        """
        route = request.scope.get("route")
        template = getattr(route, "path", None)
        if template is None:
            return "unmatched"

        template_parts = [part for part in template.split("/") if part]
        path_parts = [part for part in request.scope.get("path", "").split("/") if part]
        leading = path_parts[:max(len(path_parts) - len(template_parts), 0)]

        return "/" + "/".join(leading + template_parts)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    def __init__(self, app, require_https: bool = False, hsts_max_age: int = 31536000):
        super().__init__(app)
        self.require_https = require_https
        self.hsts_max_age = hsts_max_age

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if self.require_https:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={self.hsts_max_age}; includeSubDomains"
            )

        return response
