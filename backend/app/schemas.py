"""
Pydantic schemas for request and response validation.
"""

from pydantic import BaseModel, ConfigDict, Field

from core.security import PasswordEnvelope


class EncryptedPasswordRequest(BaseModel):
    """Password envelope fields shared by signup and login."""

    iv: str = Field(min_length=1)
    tag: str = Field(min_length=1)
    passwd: str = Field(min_length=1)

    def envelope(self) -> PasswordEnvelope:
        return PasswordEnvelope(iv=self.iv, tag=self.tag, passwd=self.passwd)


class SignupRequest(EncryptedPasswordRequest):
    id: str = Field(min_length=1, max_length=255)
    provider: str = Field(min_length=1, max_length=32)
    nickname: str = Field(min_length=1, max_length=255)


class LoginRequest(EncryptedPasswordRequest):
    id: str = Field(min_length=1, max_length=255)
    provider: str = Field(min_length=1, max_length=32)


class LoginResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    nickname: str


class AuthUrlResponse(BaseModel):
    authUrl: str


class DuplicateCheckResponse(BaseModel):
    """``message`` is present only when the check fails."""

    success: bool
    message: str | None = None


class ErrorResponse(BaseModel):
    detail: str
    status_code: int
