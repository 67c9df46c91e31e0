"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import LoginResponse, MessageResponse, UserLogin, UserSignup
from src.schemas.category import (
    CategoryCreate,
    CategoryCreateResponse,
    CategoryResponse,
    CategoryUpdate,
    CategoryUpdateResponse,
)

__all__ = [
    "UserSignup",
    "UserLogin",
    "LoginResponse",
    "MessageResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryCreateResponse",
    "CategoryUpdateResponse",
]
