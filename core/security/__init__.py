"""
Security module for the auth backend.

Provides:
- Password envelope decoding (AES-256-GCM)
- Password hashing (bcrypt)
- The authentication error taxonomy
"""

from .credentials import CredentialCodec, PasswordEnvelope, get_credential_codec
from .errors import (
    AuthError,
    CredentialKeyError,
    DecodeError,
    DuplicateUserError,
    InvalidSessionError,
    LoginFailedError,
    NotFound,
    OAuthExchangeError,
    SigningError,
    SignupFailError,
    UnsupportedProviderError,
)
from .passwords import hash_password, verify_password

__all__ = [
    "CredentialCodec",
    "PasswordEnvelope",
    "get_credential_codec",
    "hash_password",
    "verify_password",
    "AuthError",
    "CredentialKeyError",
    "DecodeError",
    "DuplicateUserError",
    "InvalidSessionError",
    "LoginFailedError",
    "NotFound",
    "OAuthExchangeError",
    "SigningError",
    "SignupFailError",
    "UnsupportedProviderError",
]
