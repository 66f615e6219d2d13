"""
Repository pattern implementations for data access.

Usage:
    from core.repositories import UserRepository
    from core.db import db

    with db.session() as session:
        repo = UserRepository(session)
        available = not repo.exists_by_nickname("mina")
"""

from .base import BaseRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
