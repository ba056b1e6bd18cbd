import logging

from app.core.errors import InvalidInputError, NotFoundError
from app.schemas.user import User, UserCreate
from app.storage.base import EntityStore

logger = logging.getLogger(__name__)


class UserService:
    """Service for registering and looking up users."""

    def __init__(self, store: EntityStore):
        self.store = store

    async def register_user(self, data: UserCreate) -> User:
        """Create a user unless the username is already taken.

        Raises:
            InvalidInputError: the username is taken
        """
        async with self.store.transaction():
            if await self.store.get_user_by_username(data.username) is not None:
                logger.warning(f"Username '{data.username}' already registered")
                raise InvalidInputError(f"Username '{data.username}' is already taken")
            user = await self.store.create_user(data)

        logger.info(f"Registered user {user.id} ('{user.username}')")
        return user

    async def get_user(self, user_id: int) -> User:
        user = await self.store.get_user(user_id)
        if user is None:
            raise NotFoundError.for_entity("User", user_id)
        return user
