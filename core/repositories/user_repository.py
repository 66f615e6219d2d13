"""User repository: the user store contract consumed by the auth flows."""

from sqlalchemy.exc import IntegrityError

from core.logging import get_logger
from core.models import User
from core.security.errors import DuplicateUserError, NotFound

from .base import BaseRepository

logger = get_logger("repository.user")


class UserRepository(BaseRepository[User]):
    """
    Repository for User operations.

    Existence checks here are advisory: two concurrent requests can both pass
    them. The unique constraints on ``users`` are what actually keep
    (oauth_provider, oauth_id) and nickname unique, and ``create`` reports a
    violation as DuplicateUserError.
    """

    model = User

    def exists_by_provider_and_id(self, provider: str, oauth_id: str) -> bool:
        """Check whether (provider, oauth_id) is already registered."""
        return self.exists_where(oauth_provider=provider, oauth_id=oauth_id)

    def exists_by_nickname(self, nickname: str) -> bool:
        """Check whether a nickname is already taken."""
        return self.exists_where(nickname=nickname)

    def find_by_provider_and_id(self, provider: str, oauth_id: str) -> User:
        """
        Get user by provider and provider-scoped id.

        Raises:
            NotFound: If no such user exists
        """
        user = self.find_one_where(oauth_provider=provider, oauth_id=oauth_id)
        if user is None:
            raise NotFound(f"{provider}:{oauth_id}")
        return user

    def create(self, **kwargs) -> User:
        """
        Insert a user and flush so constraint violations surface here.

        Raises:
            DuplicateUserError: If a unique constraint rejects the insert
        """
        user = User(**kwargs)
        self.session.add(user)
        try:
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            logger.warning(
                "user_create_conflict",
                provider=kwargs.get("oauth_provider"),
            )
            raise DuplicateUserError() from None
        return user
