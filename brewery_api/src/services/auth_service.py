"""
Bearer token service.

The API acts as an OAuth2 resource server: it trusts any JWT signed with the
configured secret whose issuer and audience match. Token issuance is kept
here for local development and tests.

Provides:
- JWT token creation (python-jose)
- JWT token validation (signature, expiry, issuer, audience)
"""

import structlog
from typing import List, Optional
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt

from brewery_api.src.config import Settings
from brewery_api.src.models.common import TokenPayload

logger = structlog.get_logger(__name__)


class TokenService:
    """Service for JWT bearer token operations."""

    def __init__(self, settings: Settings):
        """
        Initialize token service.

        Args:
            settings: Application settings (JWT secret, algorithm, issuer, audience)
        """
        self.settings = settings

    def create_access_token(
        self,
        subject: str,
        scopes: Optional[List[str]] = None,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create JWT access token.

        Args:
            subject: Client or user identifier (``sub`` claim)
            scopes: Granted scopes
            expires_delta: Custom expiration time (optional)

        Returns:
            JWT token string
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.settings.jwt_access_token_expire_minutes)

        now = datetime.now(timezone.utc)
        expire = now + expires_delta

        payload = {
            "sub": subject,
            "scope": " ".join(scopes or []),
            "exp": int(expire.timestamp()),
            "iat": int(now.timestamp()),
            "iss": self.settings.jwt_issuer,
            "aud": self.settings.jwt_audience,
        }

        token = jwt.encode(
            payload,
            self.settings.jwt_secret_key,
            algorithm=self.settings.jwt_algorithm
        )

        logger.info(
            "access_token_created",
            subject=subject,
            expires_in=expires_delta.total_seconds()
        )

        return token

    def decode_token(self, token: str) -> Optional[TokenPayload]:
        """
        Decode and validate JWT token.

        Args:
            token: JWT token string

        Returns:
            Token payload or None if invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret_key,
                algorithms=[self.settings.jwt_algorithm],
                audience=self.settings.jwt_audience,
                issuer=self.settings.jwt_issuer
            )
        except JWTError as e:
            logger.warning("token_decode_failed", error=str(e))
            return None

        if not payload.get("sub"):
            logger.warning("token_missing_subject")
            return None

        token_payload = TokenPayload(
            sub=payload["sub"],
            scopes=(payload.get("scope") or "").split(),
            exp=payload["exp"],
            iat=payload.get("iat"),
            iss=payload.get("iss"),
            aud=payload.get("aud")
        )

        logger.debug("token_decoded", subject=token_payload.sub)
        return token_payload
