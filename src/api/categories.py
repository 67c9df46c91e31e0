"""Category API endpoints."""

import logging
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from src.api.dependencies import (
    get_app_settings,
    get_category_owner_id,
    get_current_user_id,
    get_database,
    get_media_store,
)
from src.config import Settings
from src.database import Database
from src.schemas.auth import MessageResponse
from src.schemas.category import (
    CategoryCreate,
    CategoryCreateResponse,
    CategoryResponse,
    CategoryUpdate,
    CategoryUpdateResponse,
)
from src.services.media import MediaStore, public_id_from_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["categories"])

CATEGORY_FIELDS = ("category_name", "item_count", "image_url")


@dataclass
class CategorySubmission:
    """Fields and optional image file sent to a create or update route."""

    fields: dict[str, Any]
    image: UploadFile | None = None


async def read_category_submission(request: Request) -> CategorySubmission:
    """Read a category body sent as JSON, multipart or urlencoded form."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid JSON body",
            ) from None
        if not isinstance(body, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request body must be a JSON object",
            )
        return CategorySubmission(fields={key: body.get(key) for key in CATEGORY_FIELDS})

    form = await request.form()
    image = form.get("image")
    # An untouched file input arrives as an unnamed part
    if not isinstance(image, UploadFile) or not image.filename:
        image = None
    fields = {key: form.get(key) or None for key in CATEGORY_FIELDS}
    return CategorySubmission(fields=fields, image=image)


def parse_fields(model_cls: type[BaseModel], fields: dict[str, Any]):
    """Validate submitted fields, skipping the ones that were not sent."""
    try:
        return model_cls(**{key: value for key, value in fields.items() if value is not None})
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from None


async def upload_image(image: UploadFile, media_store: MediaStore, settings: Settings) -> str:
    """Check an uploaded image and send it to the media host, returning its URL."""
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only images are allowed",
        )

    # Read at most one byte past the limit
    data = await image.read(settings.max_upload_bytes + 1)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")

    if len(data) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size is {limit_mb:g}MB.",
        )

    uploaded = await media_store.upload(data, image.filename)
    return uploaded.url


@router.get("", response_model=list[CategoryResponse])
async def get_categories(
    current_user_id: Annotated[str, Depends(get_current_user_id)],
    database: Annotated[Database, Depends(get_database)],
):
    """Get all categories."""
    categories = await database.categories.list_all()
    return [CategoryResponse.model_validate(category) for category in categories]


@router.post("", response_model=CategoryCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    owner_id: Annotated[str | None, Depends(get_category_owner_id)],
    database: Annotated[Database, Depends(get_database)],
    media_store: Annotated[MediaStore, Depends(get_media_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    submission: Annotated[CategorySubmission, Depends(read_category_submission)],
):
    """Create a category from an uploaded image or an image URL.

    The upload happens before the database write and is not rolled back if
    the write fails.
    """
    image = submission.image
    if image is None and not submission.fields.get("image_url"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either an image file or image URL is required",
        )

    fields = dict(submission.fields)
    if image is not None:
        # An uploaded file takes precedence over a submitted URL
        fields["image_url"] = None
    payload = parse_fields(CategoryCreate, fields)

    if image is not None:
        payload.image_url = await upload_image(image, media_store, settings)

    category = await database.categories.create(
        image_url=payload.image_url,
        category_name=payload.category_name,
        item_count=payload.item_count,
        user_id=owner_id,
    )
    logger.info(f"Created category {category.id} ('{category.category_name}')")

    return CategoryCreateResponse(category=CategoryResponse.model_validate(category))


@router.put("/{category_id}", response_model=CategoryUpdateResponse)
async def update_category(
    category_id: str,
    current_user_id: Annotated[str, Depends(get_current_user_id)],
    database: Annotated[Database, Depends(get_database)],
    media_store: Annotated[MediaStore, Depends(get_media_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    submission: Annotated[CategorySubmission, Depends(read_category_submission)],
):
    """Update a category with whichever fields were submitted."""
    image = submission.image
    fields = dict(submission.fields)
    if image is not None:
        fields["image_url"] = None
    payload = parse_fields(CategoryUpdate, fields)

    category = await database.categories.get(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    changes = payload.model_dump(exclude_none=True)
    if image is not None:
        changes["image_url"] = await upload_image(image, media_store, settings)

    category = await database.categories.update(category, changes)

    logger.info(f"Updated category {category_id}: {sorted(changes)}")
    return CategoryUpdateResponse(category=CategoryResponse.model_validate(category))


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    current_user_id: Annotated[str, Depends(get_current_user_id)],
    database: Annotated[Database, Depends(get_database)],
    media_store: Annotated[MediaStore, Depends(get_media_store)],
):
    """Delete a category and, best-effort, its image on the media host."""
    category = await database.categories.get(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    public_id = public_id_from_url(category.image_url)
    if public_id:
        try:
            await media_store.delete(public_id)
        except Exception as e:
            # The record is removed even if the remote image is left behind
            logger.warning(f"Failed to delete image {public_id} for category {category_id}: {e}")

    await database.categories.delete(category)
    logger.info(f"Deleted category {category_id}")

    return MessageResponse(message="Category and image deleted successfully")
