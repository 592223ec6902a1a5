"""Dependency injection factories for API v1."""

from functools import lru_cache

from api.dependencies.auth import get_token_codec
from api.dependencies.database import get_uow_factory
from core.config import settings
from domain.services.auth_service import AuthService, build_credential_verifier
from domain.services.child_service import ChildService
from domain.services.upload_service import ImageUploadService
from infrastructure.storage.cloudinary_store import CloudinaryBlobStore


@lru_cache
def get_blob_store() -> CloudinaryBlobStore:
    """Get the blob store singleton."""
    return CloudinaryBlobStore.from_settings(settings)


@lru_cache
def get_upload_service() -> ImageUploadService:
    """Get Image upload service instance."""
    return ImageUploadService(
        get_blob_store(),
        folder=settings.upload_folder,
        quality=settings.upload_quality,
    )


@lru_cache
def get_child_service() -> ChildService:
    """Get Child service instance."""
    return ChildService(
        get_uow_factory(),
        upload_service=get_upload_service(),
        require_password=settings.requires_password,
    )


@lru_cache
def get_auth_service() -> AuthService:
    """Get Auth service instance for the configured login policy."""
    verifier = build_credential_verifier(settings.auth_policy, get_uow_factory())
    return AuthService(verifier, get_token_codec())
