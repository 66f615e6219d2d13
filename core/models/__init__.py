"""
SQLAlchemy models for the auth backend.

Usage:
    from core.models import User
"""

from core.db import Base

from .user import LOCAL_PROVIDER, User

__all__ = [
    "Base",
    "LOCAL_PROVIDER",
    "User",
]
