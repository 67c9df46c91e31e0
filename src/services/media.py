"""Media host integration for category images (Cloudinary)."""

import io
import logging
import re
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlparse

import cloudinary.uploader
from fastapi.concurrency import run_in_threadpool

from src.config import Settings
from src.exceptions import MediaDeleteError, MediaUploadError

logger = logging.getLogger(__name__)

CLOUDINARY_HOST = "res.cloudinary.com"
_VERSION_SEGMENT = re.compile(r"v\d+")


@dataclass(frozen=True)
class UploadedImage:
    """An image stored on the media host."""

    url: str
    public_id: str


class MediaStore(Protocol):
    """Operations the API needs from the media host."""

    async def upload(self, data: bytes, filename: str | None = None) -> UploadedImage: ...

    async def delete(self, public_id: str) -> None: ...


def public_id_from_url(url: str) -> str | None:
    """Derive the Cloudinary public id from a delivery URL.

    ``https://res.cloudinary.com/demo/image/upload/v1712/fastcart/abc.jpg``
    yields ``fastcart/abc``. Returns None for URLs not served by Cloudinary.
    """
    parsed = urlparse(url)
    if parsed.hostname != CLOUDINARY_HOST:
        return None

    segments = [s for s in parsed.path.split("/") if s]
    if "upload" not in segments:
        return None
    segments = segments[segments.index("upload") + 1 :]
    if segments and _VERSION_SEGMENT.fullmatch(segments[0]):
        segments = segments[1:]
    if not segments:
        return None

    stem = segments[-1].rsplit(".", 1)[0]
    return "/".join([*segments[:-1], stem]) or None


class CloudinaryMediaStore:
    """Uploads and deletes images through the Cloudinary SDK.

    The SDK is blocking, so calls run in the threadpool. Any SDK failure
    surfaces as MediaUploadError or MediaDeleteError.
    """

    def __init__(self, settings: Settings) -> None:
        self.folder = settings.cloudinary_folder
        self._credentials = {
            "cloud_name": settings.cloudinary_cloud_name,
            "api_key": settings.cloudinary_api_key,
            "api_secret": settings.cloudinary_api_secret,
            "secure": True,
        }

    async def upload(self, data: bytes, filename: str | None = None) -> UploadedImage:
        """Upload image bytes, limiting the stored image to 500x500."""
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                io.BytesIO(data),
                folder=self.folder,
                resource_type="image",
                transformation=[{"width": 500, "height": 500, "crop": "limit"}],
                **self._credentials,
            )
        except Exception as e:
            logger.error(f"Cloudinary upload failed for {filename or 'unnamed file'}: {e}")
            raise MediaUploadError(str(e)) from e

        logger.info(f"Uploaded image to Cloudinary as {result['public_id']}")
        return UploadedImage(url=result["secure_url"], public_id=result["public_id"])

    async def delete(self, public_id: str) -> None:
        """Delete an image by public id."""
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.destroy, public_id, invalidate=True, **self._credentials
            )
        except Exception as e:
            raise MediaDeleteError(str(e)) from e

        if result.get("result") != "ok":
            raise MediaDeleteError(f"Cloudinary returned {result.get('result')!r} for {public_id}")
        logger.info(f"Deleted image {public_id} from Cloudinary")
