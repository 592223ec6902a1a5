"""Child service layer with business logic."""

import asyncio
from collections.abc import Callable, Sequence
from uuid import UUID

import structlog

from core.exceptions import ChildNotFoundError, DuplicateEmailError
from domain.entities.child import Child, ChildDraft, UploadItem, validate_draft
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.upload_service import ImageUploadService
from infrastructure.auth.passwords import hash_password

logger = structlog.get_logger()


class ChildService:
    """Service layer for Child business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        upload_service: ImageUploadService,
        require_password: bool = True,
    ) -> None:
        self._uow_factory = uow_factory
        self._uploads = upload_service
        self._require_password = require_password

    async def list_all(self) -> list[Child]:
        """Get all children."""
        async with self._uow_factory() as uow:
            return await uow.children.list_all()  # type: ignore[no-any-return]

    async def get_by_id(self, child_id: UUID) -> Child:
        """Get a specific child."""
        async with self._uow_factory() as uow:
            child = await uow.children.get(child_id)
            if not child:
                raise ChildNotFoundError(str(child_id))
            return child

    async def create(
        self,
        draft: ChildDraft,
        files: Sequence[UploadItem] | None = None,
    ) -> tuple[Child, int]:
        """Create a child, uploading any images first.

        Creation without images is legal. A partially failed batch still
        creates the child with the images that made it; a batch where every
        file is invalid or every upload fails aborts creation.

        Returns:
            The created child and the number of images uploaded.
        """
        draft = validate_draft(draft, require_password=self._require_password)

        async with self._uow_factory() as uow:
            if await uow.children.get_by_email(draft.email):
                raise DuplicateEmailError(draft.email)

        image_urls: list[str] = []
        if files:
            image_urls = await self._uploads.process_batch(files)

        password_hash = None
        if self._require_password and draft.password:
            # bcrypt hashing is CPU bound
            password_hash = await asyncio.to_thread(hash_password, draft.password)

        child = Child(
            name=draft.name,
            age=draft.age,
            email=draft.email,
            images=image_urls,
            password_hash=password_hash,
        )

        try:
            async with self._uow_factory() as uow:
                created = await uow.children.create(child)
                await uow.commit()
        except Exception:
            if image_urls:
                logger.warning(
                    "child_create_failed_cleaning_images",
                    image_count=len(image_urls),
                )
                await self._uploads.delete_all(image_urls)
            raise

        logger.info(
            "child_created",
            child_id=str(created.id),
            uploaded_images=len(image_urls),
        )
        return created.without_password(), len(image_urls)

    async def update(
        self,
        child_id: UUID,
        name: str | None = None,
        age: int | None = None,
    ) -> Child:
        """Update a child's name and/or age."""
        async with self._uow_factory() as uow:
            updated = await uow.children.update(child_id, name=name, age=age)
            if not updated:
                raise ChildNotFoundError(str(child_id))
            await uow.commit()
            return updated

    async def delete(self, child_id: UUID) -> Child:
        """Delete a child, then best-effort delete its stored images.

        The record is the source of truth: a failed image deletion leaves an
        orphaned blob but never fails the request.
        """
        async with self._uow_factory() as uow:
            child = await uow.children.delete(child_id)
            if not child:
                raise ChildNotFoundError(str(child_id))
            await uow.commit()

        if child.images:
            deleted = await self._uploads.delete_all(child.images)
            logger.info(
                "child_images_deleted",
                child_id=str(child_id),
                requested=len(child.images),
                deleted=deleted,
            )

        return child
