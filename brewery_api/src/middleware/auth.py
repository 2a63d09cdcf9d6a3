"""
JWT bearer authentication middleware for FastAPI.

Provides:
- Bearer token extraction from the Authorization header
- Token validation through ``TokenService``
- Request state enrichment with the token principal
- 401 responses for missing/invalid tokens on protected requests

Write methods are always protected. Safe methods (GET, HEAD, OPTIONS) are
protected only when ``protect_reads`` is set.
"""

import structlog
from typing import Callable, Iterable, Optional
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from brewery_api.src.models.common import TokenPayload
from brewery_api.src.services.auth_service import TokenService

logger = structlog.get_logger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Middleware to authenticate requests using JWT bearer tokens.

    Validated claims are stored on ``request.state.principal``.
    """

    def __init__(
        self,
        app,
        token_service: TokenService,
        exempt_paths: Optional[Iterable[str]] = None,
        protect_reads: bool = False
    ):
        """
        Initialize auth middleware.

        Args:
            app: ASGI application
            token_service: Token validation service
            exempt_paths: Path prefixes that never require authentication
            protect_reads: Require a token on safe methods too
        """
        super().__init__(app)
        self.token_service = token_service
        self.exempt_paths = list(exempt_paths or [
            "/health",
            "/ready",
            "/metrics",
            "/docs",
            "/openapi.json",
            "/redoc"
        ])
        self.protect_reads = protect_reads

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Authenticate protected requests before they reach the routers.

        Args:
            request: HTTP request
            call_next: Next middleware in chain

        Returns:
            HTTP response
        """
        request.state.principal = None

        if not self._requires_auth(request):
            return await call_next(request)

        token = self._extract_token(request)

        if not token:
            logger.warning(
                "auth_missing_token",
                path=request.url.path,
                method=request.method,
                client=request.client.host if request.client else None
            )
            return self._unauthorized("Missing authentication token")

        principal = self.token_service.decode_token(token)

        if principal is None:
            logger.warning(
                "auth_invalid_token",
                path=request.url.path,
                method=request.method,
                client=request.client.host if request.client else None
            )
            return self._unauthorized("Invalid authentication token")

        request.state.principal = principal

        logger.info(
            "request_authenticated",
            path=request.url.path,
            method=request.method,
            subject=principal.sub
        )

        return await call_next(request)

    def _requires_auth(self, request: Request) -> bool:
        """
        Check whether the request must carry a valid token.

        Args:
            request: HTTP request

        Returns:
            True if authentication is required
        """
        path = request.url.path
        for exempt_path in self.exempt_paths:
            if path.startswith(exempt_path):
                return False

        if request.method in SAFE_METHODS and not self.protect_reads:
            return False

        return True

    def _extract_token(self, request: Request) -> Optional[str]:
        """
        Extract JWT token from Authorization header.

        Args:
            request: HTTP request

        Returns:
            JWT token or None if not found
        """
        authorization = request.headers.get("Authorization")

        if not authorization:
            return None

        parts = authorization.split()

        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.warning("auth_malformed_header")
            return None

        return parts[1]

    @staticmethod
    def _unauthorized(detail: str) -> JSONResponse:
        # Exception handlers do not run for errors raised in BaseHTTPMiddleware.
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": detail},
            headers={"WWW-Authenticate": "Bearer"}
        )


def get_principal_from_request(request: Request) -> TokenPayload:
    """
    Get the authenticated principal from the request.

    Args:
        request: HTTP request

    Returns:
        Token principal

    Raises:
        HTTPException: If the request was not authenticated
    """
    principal = getattr(request.state, "principal", None)

    if principal is None:
        logger.warning("principal_not_authenticated", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return principal
