"""
Authentication error taxonomy.

Every error carries the HTTP status and client-safe detail the API boundary
should answer with; handlers in backend.app.error_handlers do the mapping.
"""


class AuthError(Exception):
    """Base class for authentication flow failures."""

    status_code: int = 400
    detail: str = "Authentication error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class DecodeError(AuthError):
    """Encrypted password envelope is malformed or its auth tag does not verify."""

    status_code = 400
    detail = "Malformed credentials"


class CredentialKeyError(AuthError):
    """Password decryption key is missing or invalid."""

    status_code = 500
    detail = "Credential service unavailable"


class SignupFailError(AuthError):
    """Nickname or (provider, id) is already taken."""

    status_code = 409
    detail = "Signup failed"


class LoginFailedError(AuthError):
    """Unknown identity or wrong password. The two cases are deliberately identical."""

    status_code = 401
    detail = "Login failed"


class InvalidSessionError(AuthError):
    """Session token is missing, expired, or fails verification."""

    status_code = 401
    detail = "Not authenticated"


class SigningError(AuthError):
    """Session signing key material is unavailable."""

    status_code = 500
    detail = "Session service unavailable"


class UnsupportedProviderError(AuthError):
    """OAuth provider is not recognized."""

    status_code = 404
    detail = "Unsupported OAuth provider"


class OAuthExchangeError(AuthError):
    """Token exchange or profile fetch with the OAuth provider failed."""

    status_code = 502
    detail = "OAuth authentication failed"


class DuplicateUserError(AuthError):
    """The user store rejected an insert on a unique constraint."""

    status_code = 409
    detail = "User already exists"


class NotFound(Exception):
    """User store lookup miss. Internal only; never surfaces to clients as-is."""

    pass


__all__ = [
    "AuthError",
    "DecodeError",
    "CredentialKeyError",
    "SignupFailError",
    "LoginFailedError",
    "InvalidSessionError",
    "SigningError",
    "UnsupportedProviderError",
    "OAuthExchangeError",
    "DuplicateUserError",
    "NotFound",
]
