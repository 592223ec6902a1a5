"""Multipart image ingestion limits."""

from fastapi import UploadFile

from core.config import settings
from core.exceptions import ValidationError
from domain.entities.child import ALLOWED_IMAGE_TYPES, UploadItem


async def read_upload_files(
    files: list[UploadFile] | None,
    max_files: int = settings.max_upload_files,
    max_bytes: int = settings.max_upload_bytes,
) -> list[UploadItem]:
    """Read incoming image parts into upload items.

    Rejects the whole request when there are too many files, a file is too
    large, or a file is not a JPEG/PNG image. Empty files are passed through;
    the upload pipeline drops them.
    """
    if not files:
        return []

    # Browsers send an empty part when the file input is left blank
    files = [f for f in files if f.filename]
    if len(files) > max_files:
        raise ValidationError(
            f"Too many files. At most {max_files} images are allowed", field="images"
        )

    items: list[UploadItem] = []
    for upload in files:
        content_type = (upload.content_type or "").lower()
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError(
                "File type not allowed. Only JPEG and PNG images are accepted",
                field="images",
            )

        data = await upload.read(max_bytes + 1)
        await upload.close()
        if len(data) > max_bytes:
            raise ValidationError(
                f"File {upload.filename} exceeds the {max_bytes // (1024 * 1024)}MB limit",
                field="images",
            )

        items.append(
            UploadItem(
                filename=upload.filename or "",
                content_type=content_type,
                data=data,
            )
        )

    return items
