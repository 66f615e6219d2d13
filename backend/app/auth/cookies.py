"""
Session cookie contract shared with the client.
"""

from datetime import datetime

from core.config import Settings

SESSION_COOKIE_NAME = "Authorization"
BEARER_PREFIX = "Bearer "


def session_cookie_kwargs(settings: Settings, token: str, expires: datetime) -> dict:
    return {
        "key": SESSION_COOKIE_NAME,
        "value": f"{BEARER_PREFIX}{token}",
        "expires": expires,
        "httponly": True,
        "domain": settings.cookie_domain,
        "path": "/",
        "samesite": "lax",
        "secure": settings.is_production,
    }


def clear_session_cookie_kwargs(settings: Settings) -> dict:
    # Attributes must match the ones the cookie was set with or browsers keep it.
    return {
        "key": SESSION_COOKIE_NAME,
        "domain": settings.cookie_domain,
        "path": "/",
        "httponly": True,
        "samesite": "lax",
        "secure": settings.is_production,
    }


def token_from_cookie(value: str | None) -> str | None:
    """Strip the ``Bearer `` prefix from a session cookie value."""
    if not value:
        return None
    value = value.strip().strip('"')
    if not value.startswith(BEARER_PREFIX):
        return None
    return value[len(BEARER_PREFIX):].strip() or None
