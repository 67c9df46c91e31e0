"""Database connection and document repositories."""

import logging
from typing import Any

from beanie import PydanticObjectId, init_beanie
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import DuplicateKeyError

from src.config import Settings
from src.exceptions import DuplicateUserError
from src.models import Category, User

logger = logging.getLogger(__name__)


def parse_object_id(value: str) -> PydanticObjectId | None:
    """Parse a path identifier, returning None when it is not a valid ObjectId."""
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        return None


class UserRepository:
    """Queries against the users collection."""

    async def get_by_username(self, username: str) -> User | None:
        """Get a user by normalized username."""
        return await User.find_one(User.username == username)

    async def create(self, name: str, username: str, password_hash: str) -> User:
        """Insert a new user.

        Raises:
            DuplicateUserError: If the unique username index rejects the insert.
        """
        user = User(name=name, username=username, password=password_hash)
        try:
            return await user.insert()
        except DuplicateKeyError as e:
            raise DuplicateUserError(f"Username {username!r} already exists") from e


class CategoryRepository:
    """Queries against the categories collection."""

    async def list_all(self) -> list[Category]:
        """Get every category in insertion order."""
        return await Category.find_all().to_list()

    async def get(self, category_id: str) -> Category | None:
        """Get a category by id; unknown or malformed ids yield None."""
        object_id = parse_object_id(category_id)
        if object_id is None:
            return None
        return await Category.get(object_id)

    async def create(
        self,
        image_url: str,
        category_name: str,
        item_count: int = 0,
        user_id: str | None = None,
    ) -> Category:
        """Insert a new category."""
        category = Category(
            image_url=image_url,
            category_name=category_name,
            item_count=item_count,
            user_id=user_id,
        )
        return await category.insert()

    async def update(self, category: Category, fields: dict[str, Any]) -> Category:
        """Apply a partial update to a loaded category and save it."""
        for key, value in fields.items():
            setattr(category, key, value)
        await category.save()
        return category

    async def delete(self, category: Category) -> None:
        """Delete a loaded category."""
        await category.delete()


class Database:
    """MongoDB connection with the repositories built on it.

    Created once at startup and shared read-only by every request.
    """

    def __init__(self, settings: Settings):
        self.client = AsyncIOMotorClient(settings.mongo_uri)
        self.db_name = settings.mongo_db_name
        self.users = UserRepository()
        self.categories = CategoryRepository()

    async def connect(self) -> None:
        """Initialize Beanie and create the collection indexes."""
        await init_beanie(database=self.client[self.db_name], document_models=[User, Category])
        logger.info(f"Connected to MongoDB database '{self.db_name}'")

    async def close(self) -> None:
        """Close the Motor client."""
        self.client.close()
