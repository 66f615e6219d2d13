"""
Authentication dependencies for FastAPI routes.

The session travels in the ``Authorization`` cookie as ``Bearer <token>``.
"""

from dataclasses import dataclass
from typing import Any, Dict

from fastapi import Cookie, Depends

from core.security.errors import InvalidSessionError

from .cookies import SESSION_COOKIE_NAME, token_from_cookie
from .jwt import SessionIssuer, get_session_issuer


@dataclass(frozen=True)
class SessionClaims:
    """Verified identity carried by a session token."""

    oauth_id: str
    provider: str
    nickname: str | None
    payload: Dict[str, Any]


def get_current_session(
    session_cookie: str | None = Cookie(None, alias=SESSION_COOKIE_NAME),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> SessionClaims:
    """
    Resolve the session from the request cookie.

    Raises:
        InvalidSessionError: If the cookie is missing, malformed, expired or forged.
    """
    token = token_from_cookie(session_cookie)
    if not token:
        raise InvalidSessionError()

    payload = issuer.decode(token)
    return SessionClaims(
        oauth_id=str(payload["id"]),
        provider=str(payload["provider"]),
        nickname=payload.get("nickname"),
        payload=payload,
    )
