"""
Credential codec for client-encrypted passwords.

The client encrypts the password with AES-256-GCM and sends three base64
strings: the nonce (``iv``), the 16-byte authentication tag (``tag``) and the
ciphertext (``passwd``). This module turns that envelope back into plaintext.
"""

import base64
import binascii
import os
from dataclasses import dataclass
from functools import lru_cache

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from core.config import get_settings
from core.logging import get_logger

from .errors import CredentialKeyError, DecodeError

logger = get_logger("security.credentials")

KEY_BYTES = 32
NONCE_BYTES = 12
TAG_BYTES = 16


@dataclass(frozen=True)
class PasswordEnvelope:
    """Encrypted password as sent by the client (all fields base64)."""

    iv: str
    tag: str
    passwd: str


def _b64decode(value: str, field: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError, TypeError):
        raise DecodeError(f"Invalid base64 in '{field}'") from None


class CredentialCodec:
    """
    AES-256-GCM codec for password envelopes.

    Usage:
        codec = CredentialCodec(key)
        envelope = codec.encode("hunter2")
        codec.decode(envelope.iv, envelope.tag, envelope.passwd)  # "hunter2"

    Environment:
        PASSWORD_ENCRYPTION_KEY: Base64-encoded 32-byte AES key
    """

    def __init__(self, key: str | bytes | None):
        self._aesgcm: AESGCM | None = None

        if not key:
            logger.warning("credential_key_missing", reason="PASSWORD_ENCRYPTION_KEY not set")
            return

        try:
            raw = key if isinstance(key, bytes) else base64.b64decode(key.encode(), validate=True)
        except binascii.Error:
            logger.error("credential_key_invalid", reason="not base64")
            return
        if len(raw) != KEY_BYTES:
            logger.error("credential_key_invalid", key_bytes=len(raw))
            return

        self._aesgcm = AESGCM(raw)

    @property
    def is_available(self) -> bool:
        return self._aesgcm is not None

    def _cipher(self) -> AESGCM:
        if self._aesgcm is None:
            raise CredentialKeyError()
        return self._aesgcm

    def decode(self, iv: str, auth_tag: str, ciphertext: str) -> str:
        """
        Decrypt a password envelope.

        Raises:
            DecodeError: If any field is malformed or the tag does not verify
            CredentialKeyError: If no valid key is configured
        """
        cipher = self._cipher()

        nonce = _b64decode(iv, "iv")
        tag = _b64decode(auth_tag, "tag")
        data = _b64decode(ciphertext, "passwd")

        if not nonce:
            raise DecodeError("Empty 'iv'")
        if len(tag) != TAG_BYTES:
            raise DecodeError("Invalid 'tag' length")

        try:
            plaintext = cipher.decrypt(nonce, data + tag, None)
        except InvalidTag:
            logger.warning("credential_tag_mismatch")
            raise DecodeError() from None

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError:
            raise DecodeError("Password is not valid UTF-8") from None

    def encode(self, plaintext: str) -> PasswordEnvelope:
        """Encrypt a password the way the client does."""
        cipher = self._cipher()
        nonce = os.urandom(NONCE_BYTES)
        sealed = cipher.encrypt(nonce, plaintext.encode("utf-8"), None)
        data, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]
        return PasswordEnvelope(
            iv=base64.b64encode(nonce).decode(),
            tag=base64.b64encode(tag).decode(),
            passwd=base64.b64encode(data).decode(),
        )


@lru_cache(maxsize=1)
def get_credential_codec() -> CredentialCodec:
    """Get the codec built from application settings."""
    return CredentialCodec(get_settings().password_encryption_key)


__all__ = ["CredentialCodec", "PasswordEnvelope", "get_credential_codec"]
