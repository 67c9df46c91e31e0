"""Pytest configuration and fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from src.config import Settings
from src.exceptions import DuplicateUserError, MediaUploadError
from src.main import create_app
from src.models.mixins import utcnow
from src.services.media import UploadedImage


class AuthHeaders(dict):
    """Dict subclass that also stores user info."""

    def __init__(self, *args, user_id: str | None = None, username: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.username = username


@dataclass
class StoredUser:
    name: str
    username: str
    password: str
    id: str = field(default_factory=lambda: str(ObjectId()))
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass
class StoredCategory:
    image_url: str
    category_name: str
    item_count: int = 0
    user_id: str | None = None
    id: str = field(default_factory=lambda: str(ObjectId()))
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


class InMemoryUserRepository:
    """Test double for the users collection."""

    def __init__(self):
        self.users: dict[str, StoredUser] = {}

    async def get_by_username(self, username: str) -> StoredUser | None:
        return next((u for u in self.users.values() if u.username == username), None)

    async def create(self, name: str, username: str, password_hash: str) -> StoredUser:
        if await self.get_by_username(username):
            raise DuplicateUserError(username)
        user = StoredUser(name=name, username=username, password=password_hash)
        self.users[user.id] = user
        return user


class InMemoryCategoryRepository:
    """Test double for the categories collection."""

    def __init__(self):
        self.categories: dict[str, StoredCategory] = {}

    async def list_all(self) -> list[StoredCategory]:
        return list(self.categories.values())

    async def get(self, category_id: str) -> StoredCategory | None:
        return self.categories.get(category_id)

    async def create(self, image_url, category_name, item_count=0, user_id=None) -> StoredCategory:
        category = StoredCategory(
            image_url=image_url,
            category_name=category_name,
            item_count=item_count,
            user_id=user_id,
        )
        self.categories[category.id] = category
        return category

    async def update(self, category: StoredCategory, fields: dict[str, Any]) -> StoredCategory:
        for key, value in fields.items():
            setattr(category, key, value)
        category.updated_at = utcnow()
        return category

    async def delete(self, category: StoredCategory) -> None:
        self.categories.pop(category.id, None)


class InMemoryDatabase:
    """Stands in for src.database.Database."""

    def __init__(self):
        self.users = InMemoryUserRepository()
        self.categories = InMemoryCategoryRepository()
        self.connected = False

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False


class FakeMediaStore:
    """Records uploads and deletions instead of calling Cloudinary."""

    def __init__(self):
        self.uploads: list[tuple[str | None, bytes]] = []
        self.deleted: list[str] = []
        self.fail_upload = False
        self.delete_error: Exception | None = None

    async def upload(self, data: bytes, filename: str | None = None) -> UploadedImage:
        if self.fail_upload:
            raise MediaUploadError("Upload rejected by media host")
        self.uploads.append((filename, data))
        public_id = f"fastcart/image{len(self.uploads)}"
        return UploadedImage(
            url=f"https://res.cloudinary.com/demo/image/upload/v1700000000/{public_id}.png",
            public_id=public_id,
        )

    async def delete(self, public_id: str) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(public_id)


@pytest.fixture
def settings():
    """Settings isolated from the developer's .env file."""
    return Settings(
        _env_file=None,
        jwt_secret="test-secret",
        environment="test",
        max_upload_bytes=1024,
    )


@pytest.fixture
def database():
    return InMemoryDatabase()


@pytest.fixture
def media_store():
    return FakeMediaStore()


@pytest.fixture
def app(settings, database, media_store):
    return create_app(settings, database=database, media_store=media_store)


@pytest.fixture
def client(app):
    """Create a test client with the in-memory backends."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Create a user, log in and return bearer auth headers."""
    response = client.post(
        "/api/auth/signup",
        json={"name": "Test User", "username": "tester", "password": "testpass123"},
    )
    assert response.status_code == 201

    response = client.post("/api/auth/login", json={"username": "tester", "password": "testpass123"})
    assert response.status_code == 200
    data = response.json()

    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user_id"],
        username="tester",
    )
