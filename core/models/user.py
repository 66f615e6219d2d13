"""
User model.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from core.db import Base

LOCAL_PROVIDER = "local"


class User(Base):
    """
    Identity record for both local and OAuth accounts.

    Attributes:
        oauth_provider: Provider tag ("local", "google")
        oauth_id: Identifier, unique within its provider
        nickname: Display name, unique across all users
        password_hash: bcrypt hash, only present for local accounts
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("oauth_provider", "oauth_id", name="uq_users_provider_oauth_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    oauth_provider: Mapped[str] = mapped_column(String(32), index=True)
    oauth_id: Mapped[str] = mapped_column(String(255), index=True)
    nickname: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )

    @property
    def is_local(self) -> bool:
        return self.oauth_provider == LOCAL_PROVIDER

    def __repr__(self) -> str:
        return f"<User id={self.id} provider={self.oauth_provider!r} nickname={self.nickname!r}>"
