"""Category model."""

from beanie import PydanticObjectId

from src.models.mixins import TimestampedDocument


class Category(TimestampedDocument):
    """Category document with an image hosted on the media host."""

    image_url: str
    category_name: str
    item_count: int = 0
    user_id: PydanticObjectId | None = None

    class Settings:
        name = "categories"
