"""Cloudinary blob store implementation.

The Cloudinary SDK is synchronous, so every call runs in a worker thread to
keep the event loop free while several uploads are in flight.
"""

import asyncio
import io
import logging
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader

from core.config import Settings
from infrastructure.storage.provider import BlobStoreError

logger = logging.getLogger(__name__)


class CloudinaryBlobStore:
    """Blob store backed by Cloudinary."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str) -> None:
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "secure": True,
        }

    @classmethod
    def from_settings(cls, config: Settings) -> "CloudinaryBlobStore":
        return cls(
            cloud_name=config.cloudinary_cloud_name,
            api_key=config.cloudinary_api_key,
            api_secret=config.cloudinary_api_secret,
        )

    async def upload(self, data: bytes, *, folder: str, quality: str) -> str:
        """Upload image bytes and return the secure URL."""
        try:
            result: dict[str, Any] = await asyncio.to_thread(
                cloudinary.uploader.upload,
                io.BytesIO(data),
                folder=folder,
                resource_type="image",
                quality=quality,
                **self._credentials,
            )
        except cloudinary.exceptions.Error as e:
            raise BlobStoreError(str(e)) from e

        url = result.get("secure_url")
        if not url:
            raise BlobStoreError("Upload response did not include a URL")
        return str(url)

    async def destroy(self, public_id: str) -> None:
        """Delete an image. An already-missing image is not an error."""
        try:
            result: dict[str, Any] = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                public_id,
                resource_type="image",
                **self._credentials,
            )
        except cloudinary.exceptions.Error as e:
            raise BlobStoreError(str(e)) from e

        outcome = result.get("result")
        if outcome == "not found":
            logger.info("Blob %s was already deleted", public_id)
        elif outcome != "ok":
            raise BlobStoreError(f"Unexpected destroy result for {public_id}: {outcome}")
