# helpers/image_upload_helper.py
import logging
import mimetypes
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from config.database import UPLOAD_DIR
from config.settings import settings
from utils.exceptions import ImageUploadError

logger = logging.getLogger(__name__)


class ImageHost(ABC):
    """Stores raw image bytes and returns a durable URL, or raises ImageUploadError."""

    @abstractmethod
    def upload(self, image_bytes: bytes, content_type: Optional[str] = None) -> str:
        ...


class CloudinaryImageHost(ImageHost):
    """Uploads through the Cloudinary SDK."""

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key or settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret or settings.CLOUDINARY_API_SECRET
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        if self.configured:
            cloudinary.config(
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
                secure=True,
            )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def upload(self, image_bytes: bytes, content_type: Optional[str] = None) -> str:
        if not self.configured:
            raise ImageUploadError("Cloudinary credentials are not configured")

        try:
            result = cloudinary.uploader.upload(
                image_bytes,
                resource_type="image",
                timeout=self.timeout,
            )
        except (cloudinary.exceptions.Error, OSError) as exc:
            raise ImageUploadError(f"Cloudinary upload failed: {exc}")

        url = (result or {}).get("secure_url")
        if not url:
            raise ImageUploadError("Cloudinary upload failed: no secure_url in response")
        return url


class LocalImageHost(ImageHost):
    """Writes images under UPLOAD_DIR, served by the app at /uploads."""

    def __init__(self, upload_dir: Optional[Path] = None, base_url: Optional[str] = None):
        self.upload_dir = Path(upload_dir or UPLOAD_DIR)
        self.base_url = (base_url or settings.BACKEND_URL).rstrip("/")

    def upload(self, image_bytes: bytes, content_type: Optional[str] = None) -> str:
        ext = mimetypes.guess_extension(content_type or "") or ".bin"
        unique_name = f"{uuid.uuid4().hex}{ext}"
        dest = self.upload_dir / unique_name
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(image_bytes)
        except OSError as exc:
            raise ImageUploadError(f"Could not store image: {exc}")
        return f"{self.base_url}/uploads/{unique_name}"


_image_host: Optional[ImageHost] = None


def get_image_host() -> ImageHost:
    """FastAPI dependency returning the configured image host."""
    global _image_host
    if _image_host is None:
        if settings.IMAGE_HOST == "local":
            _image_host = LocalImageHost()
        else:
            _image_host = CloudinaryImageHost()
        logger.info("Image host: %s", _image_host.__class__.__name__)
    return _image_host
