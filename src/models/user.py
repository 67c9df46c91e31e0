"""User model."""

from typing import Annotated

from beanie import Indexed

from src.models.mixins import TimestampedDocument


class User(TimestampedDocument):
    """User document for authentication and category ownership."""

    name: str
    username: Annotated[str, Indexed(unique=True)]
    password: str

    class Settings:
        name = "users"
