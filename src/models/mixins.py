"""Mixins for Beanie documents."""

from datetime import UTC, datetime

from beanie import Document, Replace, Save, SaveChanges, Update, before_event
from pydantic import Field


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


class TimestampedDocument(Document):
    """Document base with created_at and updated_at fields."""

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @before_event(Replace, Save, SaveChanges, Update)
    def touch(self) -> None:
        """Refresh updated_at before every write of an existing document."""
        self.updated_at = utcnow()
