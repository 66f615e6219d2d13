"""
Session token issuing and verification (JWT).
"""

import uuid
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jose import JWTError, jwt

from core.config import SESSION_TTL_SECONDS, Settings, get_settings
from core.logging import get_logger
from core.models import User
from core.security.errors import InvalidSessionError, SigningError

logger = get_logger("auth.jwt")

SESSION_TTL = timedelta(seconds=SESSION_TTL_SECONDS)


def _read_key(path: str | None, kind: str) -> str:
    if not path:
        raise SigningError(f"JWT {kind} key path not configured")
    try:
        return Path(path).read_text()
    except OSError as exc:
        logger.error("jwt_key_unreadable", kind=kind, error_type=type(exc).__name__)
        raise SigningError(f"JWT {kind} key unavailable") from None


class SessionIssuer:
    """
    Issues and verifies signed session tokens.

    HS* algorithms sign with JWT_SECRET_KEY; RS* algorithms sign with the PEM
    files at JWT_PRIVATE_KEY_PATH and verify with JWT_PUBLIC_KEY_PATH.
    Tokens carry the user's oauth id and provider and expire exactly
    SESSION_TTL after issuance.
    """

    def __init__(self, settings: Settings):
        self.algorithm = settings.jwt_algorithm
        self._settings = settings

    def _signing_key(self) -> str:
        if self._settings.uses_rsa_signing:
            return _read_key(self._settings.jwt_private_key_path, "private")
        if not self._settings.jwt_secret_key:
            raise SigningError("JWT secret not configured")
        return self._settings.jwt_secret_key

    def _verifying_key(self) -> str:
        if self._settings.uses_rsa_signing:
            return _read_key(self._settings.jwt_public_key_path, "public")
        if not self._settings.jwt_secret_key:
            raise SigningError("JWT secret not configured")
        return self._settings.jwt_secret_key

    @staticmethod
    def expires_at(issued_at: datetime) -> datetime:
        return issued_at + SESSION_TTL

    def issue(self, provider: str, user: User, issued_at: datetime | None = None) -> str:
        """
        Create a signed session token for a verified user.

        Args:
            provider: Provider the user authenticated with.
            user: The verified user.
            issued_at: Issuance time; defaults to now. JWT timestamps have
                second precision, so sub-second parts are dropped.

        Raises:
            SigningError: If signing key material is unavailable.
        """
        issued_at = (issued_at or datetime.now(timezone.utc)).replace(microsecond=0)
        claims: Dict[str, Any] = {
            "id": user.oauth_id,
            "provider": provider,
            "nickname": user.nickname,
            "iat": issued_at,
            "exp": self.expires_at(issued_at),
            "jti": str(uuid.uuid4()),
        }
        try:
            return jwt.encode(claims, self._signing_key(), algorithm=self.algorithm)
        except JWTError as exc:
            logger.error("jwt_sign_failed", error_type=type(exc).__name__)
            raise SigningError() from None

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a session token.

        Raises:
            InvalidSessionError: If token is invalid or signature/expiry check fails.
        """
        try:
            payload = jwt.decode(token, self._verifying_key(), algorithms=[self.algorithm])
        except JWTError:
            raise InvalidSessionError() from None
        if not payload.get("id") or not payload.get("provider"):
            raise InvalidSessionError()
        return payload


@lru_cache(maxsize=1)
def get_session_issuer() -> SessionIssuer:
    """Get the issuer built from application settings."""
    return SessionIssuer(get_settings())
