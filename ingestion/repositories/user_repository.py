"""User lookups. Users are owned elsewhere; ingestion only reads them."""

import uuid

from ingestion.exceptions import UserNotFoundError
from ingestion.logging import get_logger
from ingestion.models import User

from .base import BaseRepository

logger = get_logger("repository.user")


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    def require(self, user_id: uuid.UUID) -> User:
        """
        Resolve a user id or raise.

        Raises:
            UserNotFoundError: no user with this id
        """
        user = self.get_by_id(user_id)
        if user is None:
            logger.warning("user_not_found", user_id=str(user_id))
            raise UserNotFoundError(user_id)
        return user
