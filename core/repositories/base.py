"""Base repository class with common data access operations."""

from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.db import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Base repository providing common operations.

    Usage:
        class UserRepository(BaseRepository[User]):
            model = User

        repo = UserRepository(session)
        user = repo.get_by_id(1)
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def _filter_clauses(self, filters: dict) -> list:
        clauses = []
        for key, value in filters.items():
            if not hasattr(self.model, key):
                raise ValueError(f"Unknown filter key: {key}")
            clauses.append(getattr(self.model, key) == value)
        return clauses

    def get_by_id(self, id: int) -> T | None:
        """Get a single record by ID."""
        return self.session.get(self.model, id)

    def find_one_where(self, **filters) -> T | None:
        """Get the first record matching filters."""
        stmt = select(self.model).where(*self._filter_clauses(filters)).limit(1)
        return self.session.scalars(stmt).first()

    def create(self, **kwargs) -> T:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()
        return instance

    def count(self, **filters) -> int:
        """Get count of records, optionally filtered."""
        stmt = select(func.count()).select_from(self.model).where(*self._filter_clauses(filters))
        return self.session.scalar(stmt) or 0

    def exists_where(self, **filters) -> bool:
        """Check if any record exists matching filters."""
        stmt = select(select(self.model).where(*self._filter_clauses(filters)).exists())
        return bool(self.session.scalar(stmt))
