"""Image upload pipeline.

Uploads every eligible file of a batch concurrently and waits for all of them
to settle. A failed upload never cancels its siblings; only a batch in which
nothing succeeds is an error.
"""

import asyncio
from collections.abc import Sequence
from urllib.parse import urlparse

import structlog

from core.exceptions import AllInvalidError, AllUploadsFailedError, EmptyBatchError
from domain.entities.child import UploadItem
from infrastructure.storage.provider import IBlobStore

logger = structlog.get_logger()

DEFAULT_FOLDER = "children_profiles"
DEFAULT_QUALITY = "auto:good"


def public_id_from_url(url: str, folder: str = DEFAULT_FOLDER) -> str:
    """Derive the folder-scoped blob identifier from a stored image URL.

    ``https://res.example.com/.../children_profiles/abc123.jpg`` becomes
    ``children_profiles/abc123``.
    """
    last_segment = urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]
    stem = last_segment.split(".", 1)[0]
    return f"{folder}/{stem}"


class ImageUploadService:
    """Uploads and deletes child images in the remote blob store."""

    def __init__(
        self,
        blob_store: IBlobStore,
        folder: str = DEFAULT_FOLDER,
        quality: str = DEFAULT_QUALITY,
    ) -> None:
        self._blob_store = blob_store
        self._folder = folder
        self._quality = quality

    @property
    def folder(self) -> str:
        return self._folder

    async def process_batch(self, items: Sequence[UploadItem] | None) -> list[str]:
        """Upload a batch of images and return the URLs that succeeded.

        URLs are returned in the order uploads finished, not input order.

        Raises:
            EmptyBatchError: No items were given
            AllInvalidError: Every item was empty or not a JPEG/PNG image
            AllUploadsFailedError: Every upload to the blob store failed
        """
        if not items:
            raise EmptyBatchError()

        eligible: list[UploadItem] = []
        for item in items:
            if item.is_eligible:
                eligible.append(item)
            else:
                logger.warning(
                    "upload_item_dropped",
                    filename=item.filename,
                    content_type=item.content_type,
                    size=item.size,
                )

        if not eligible:
            raise AllInvalidError(len(items))

        tasks = [asyncio.create_task(self._upload_one(item)) for item in eligible]

        urls: list[str] = []
        failures = 0
        for settled in asyncio.as_completed(tasks):
            try:
                urls.append(await settled)
            except Exception:
                failures += 1

        logger.info(
            "upload_batch_settled",
            received=len(items),
            eligible=len(eligible),
            uploaded=len(urls),
            failed=failures,
        )

        if not urls:
            raise AllUploadsFailedError(len(eligible))

        return urls

    async def delete_all(self, urls: Sequence[str]) -> int:
        """Delete the blobs behind the given URLs, concurrently.

        Failures are logged and swallowed; the number of successful deletions
        is returned.
        """
        if not urls:
            return 0

        public_ids = [public_id_from_url(url, self._folder) for url in urls]
        results = await asyncio.gather(
            *(self._blob_store.destroy(public_id) for public_id in public_ids),
            return_exceptions=True,
        )

        deleted = 0
        for public_id, result in zip(public_ids, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "image_delete_failed",
                    public_id=public_id,
                    error=str(result),
                )
            else:
                deleted += 1
        return deleted

    async def _upload_one(self, item: UploadItem) -> str:
        try:
            url = await self._blob_store.upload(
                item.data, folder=self._folder, quality=self._quality
            )
        except Exception as e:
            logger.error(
                "image_upload_failed",
                filename=item.filename,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        logger.debug("image_uploaded", filename=item.filename, url=url)
        return url
