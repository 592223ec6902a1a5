"""Blob store protocol."""

from typing import Protocol


class BlobStoreError(Exception):
    """A remote blob store operation failed."""


class IBlobStore(Protocol):
    """Protocol for remote image storage."""

    async def upload(self, data: bytes, *, folder: str, quality: str) -> str:
        """
        Upload an image.

        Args:
            data: Raw image bytes
            folder: Storage folder the image is placed under
            quality: Delivery quality transform hint (e.g. "auto:good")

        Returns:
            The public HTTPS URL of the stored image

        Raises:
            BlobStoreError: If the upload fails
        """
        ...

    async def destroy(self, public_id: str) -> None:
        """
        Delete an image by its folder-scoped identifier.

        Raises:
            BlobStoreError: If the deletion fails
        """
        ...
