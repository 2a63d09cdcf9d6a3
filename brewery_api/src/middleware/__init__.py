"""FastAPI middleware components.

This package contains custom middleware for request/response processing:
bearer authentication, request logging with correlation IDs and metrics,
and security headers.
"""

from brewery_api.src.middleware.auth import (
    AuthMiddleware,
    get_principal_from_request,
)
from brewery_api.src.middleware.request_logging import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

__all__ = [
    "AuthMiddleware",
    "get_principal_from_request",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
