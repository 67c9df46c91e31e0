"""Beanie document models."""

from src.models.category import Category
from src.models.user import User

__all__ = [
    "User",
    "Category",
]
