"""Verification of identity tokens issued by the authentication collaborator."""
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt

from alumni_backend.config import get_settings

logger = logging.getLogger(__name__)


class AuthError(RuntimeError):
    """Raised when authentication fails."""


class AuthService:
    """Encodes and decodes alumni access tokens (HS* JWTs with the alumni id in ``sub``)."""

    def __init__(self):
        self.settings = get_settings()

    def create_access_token(self, alumni_id: UUID, *, expires_minutes: int | None = None) -> str:
        """Issue an access token for ``alumni_id``.

        Login is handled elsewhere; this exists for service-to-service calls and tests.
        """
        now = datetime.now(UTC)
        minutes = expires_minutes if expires_minutes is not None else self.settings.access_token_exp_minutes
        claims = {
            "sub": str(alumni_id),
            "iat": int(now.timestamp()),
            "exp": now + timedelta(minutes=minutes),
        }
        return jwt.encode(claims, self.settings.secret_key, algorithm=self.settings.jwt_algorithm)

    def decode_access_token(self, token: str) -> dict:
        """Decode and verify an access token.

        Raises:
            AuthError: ``token_expired`` or ``invalid_token``
        """
        try:
            return jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[self.settings.jwt_algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("token_expired") from exc
        except jwt.InvalidTokenError as exc:
            logger.debug(f"Rejected access token: {exc}")
            raise AuthError("invalid_token") from exc
