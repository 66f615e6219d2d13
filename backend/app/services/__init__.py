"""
Backend services.

Services hold the business flows; routers translate them to HTTP.
"""

from .auth_service import (
    AuthDependencies,
    AuthService,
    DuplicateCheckResult,
    IssuedSession,
    LoginResult,
    OAuthLoginResult,
)

__all__ = [
    "AuthDependencies",
    "AuthService",
    "DuplicateCheckResult",
    "IssuedSession",
    "LoginResult",
    "OAuthLoginResult",
]
