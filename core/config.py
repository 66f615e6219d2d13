"""
Application configuration using Pydantic settings.

Usage:
    from core.config import get_settings
    settings = get_settings()

Settings are built once at startup and handed to the auth flow through the
dependency bundle (see backend.app.dependencies).
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Session validity window is part of the cookie contract with the client.
SESSION_TTL_SECONDS = 60 * 60


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    Required for production:
        - JWT_SECRET_KEY (min 32 chars) or JWT_PRIVATE_KEY_PATH/JWT_PUBLIC_KEY_PATH for RS256
        - PASSWORD_ENCRYPTION_KEY (base64, 32 bytes)
        - GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET / GOOGLE_REDIRECT_URL (for OAuth)
        - CLIENT_URL
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = "Memories Auth"
    debug: bool = Field(default=False, validation_alias="DEBUG")
    env: str = Field(default="development", validation_alias="ENV")
    port: int = Field(default=5000, validation_alias="PORT")

    # Database
    database_url: str = Field(default="sqlite:///memories_auth.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")

    # Client application
    client_url: str = Field(default="http://127.0.0.1:3000", validation_alias="CLIENT_URL")
    cors_allowed_origins: str = Field(default="http://127.0.0.1:3000", validation_alias="CORS_ALLOWED_ORIGINS")

    # Google OAuth
    google_client_id: str = Field(default="", validation_alias="GOOGLE_CLIENT_ID")
    google_client_secret: str = Field(default="", validation_alias="GOOGLE_CLIENT_SECRET")
    google_redirect_url: str = Field(default="", validation_alias="GOOGLE_REDIRECT_URL")
    oauth_timeout_seconds: float = Field(default=10.0, validation_alias="OAUTH_TIMEOUT_SECONDS")

    # Session tokens
    jwt_secret_key: str = Field(default="CHANGE_ME", validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    jwt_private_key_path: Optional[str] = Field(default=None, validation_alias="JWT_PRIVATE_KEY_PATH")
    jwt_public_key_path: Optional[str] = Field(default=None, validation_alias="JWT_PUBLIC_KEY_PATH")
    cookie_domain: str = Field(default="127.0.0.1", validation_alias="COOKIE_DOMAIN")

    # Credentials
    # Generate with: python -c "import base64, os; print(base64.b64encode(os.urandom(32)).decode())"
    password_encryption_key: Optional[str] = Field(default=None, validation_alias="PASSWORD_ENCRYPTION_KEY")
    bcrypt_rounds: int = Field(default=10, validation_alias="BCRYPT_ROUNDS")

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Only HMAC and RSA signing are supported."""
        algorithm = v.strip().upper()
        if not (algorithm.startswith("HS") or algorithm.startswith("RS")):
            raise ValueError(f"Unsupported JWT_ALGORITHM '{v}' (use HS256 or RS256)")
        return algorithm

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")

    @property
    def uses_rsa_signing(self) -> bool:
        return self.jwt_algorithm.startswith("RS")

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    def validate_production_config(self) -> tuple[List[str], List[str]]:
        """
        Validate configuration for production deployment.

        Returns:
            Tuple of (errors, warnings) - errors are fatal, warnings are advisory
        """
        errors = []
        warnings = []

        if self.uses_rsa_signing:
            if not self.jwt_private_key_path or not self.jwt_public_key_path:
                errors.append("JWT_PRIVATE_KEY_PATH and JWT_PUBLIC_KEY_PATH are required for RS* signing")
        elif self.jwt_secret_key == "CHANGE_ME":
            errors.append("JWT_SECRET_KEY must be set for production")
        elif len(self.jwt_secret_key) < 32:
            warnings.append("JWT_SECRET_KEY should be at least 32 characters")

        if not self.password_encryption_key:
            errors.append("PASSWORD_ENCRYPTION_KEY is required to decode login/signup passwords")

        if not self.google_client_id or not self.google_client_secret:
            warnings.append("GOOGLE_CLIENT_ID/GOOGLE_CLIENT_SECRET not set - Google login will fail")
        if not self.google_redirect_url:
            warnings.append("GOOGLE_REDIRECT_URL not set - Google login will fail")

        if self.bcrypt_rounds < 10:
            warnings.append(f"BCRYPT_ROUNDS={self.bcrypt_rounds} is below the recommended cost of 10")

        return errors, warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["SESSION_TTL_SECONDS", "Settings", "get_settings"]
