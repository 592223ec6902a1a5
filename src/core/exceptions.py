"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    CHILD_NO_LONGER_EXISTS = "CHILD_NO_LONGER_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    NOT_REGISTERED = "NOT_REGISTERED"

    # Not found errors (404)
    CHILD_NOT_FOUND = "CHILD_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
    MISSING_IDENTITY = "MISSING_IDENTITY"

    # Upload errors
    EMPTY_BATCH = "EMPTY_BATCH"
    ALL_FILES_INVALID = "ALL_FILES_INVALID"
    ALL_UPLOADS_FAILED = "ALL_UPLOADS_FAILED"

    # Conflict errors (409)
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Missing or out-of-range input."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class MissingCredentialsError(AppException):
    """Login attempted without an identity field or without a password."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.MISSING_CREDENTIALS,
            message="Please provide email/name and password",
            status_code=400,
        )


class MissingIdentityError(AppException):
    """Login attempted without a name or an email."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.MISSING_IDENTITY,
            message="Please provide a name or an email",
            status_code=400,
        )


class InvalidCredentialsError(AuthenticationError):
    """No matching child, or the password does not match."""

    def __init__(self) -> None:
        super().__init__(
            message="Incorrect email/name or password",
            error_code=ErrorCode.INVALID_CREDENTIALS,
        )


class NotRegisteredError(AuthenticationError):
    """Identity-only login found no matching child."""

    def __init__(self) -> None:
        super().__init__(
            message="Child is not registered",
            error_code=ErrorCode.NOT_REGISTERED,
        )


class ChildNotFoundError(AppException):
    """Child not found."""

    def __init__(self, child_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CHILD_NOT_FOUND,
            message=f"Child not found: {child_id}",
            status_code=404,
            details={"child_id": child_id},
        )


class DuplicateEmailError(AppException):
    """A child with this email already exists."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_EMAIL,
            message="Email is already registered",
            status_code=409,
            details={"email": email},
        )


class UploadError(AppException):
    """Base class for upload pipeline failures."""


class EmptyBatchError(UploadError):
    """No files were supplied to the upload pipeline."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.EMPTY_BATCH,
            message="No files were provided for upload",
            status_code=400,
        )


class AllInvalidError(UploadError):
    """Every supplied file was empty or of a disallowed type."""

    def __init__(self, count: int) -> None:
        super().__init__(
            error_code=ErrorCode.ALL_FILES_INVALID,
            message="All provided files are invalid for upload",
            status_code=400,
            details={"received": count},
        )


class AllUploadsFailedError(UploadError):
    """Every upload to the blob store failed."""

    def __init__(self, count: int) -> None:
        super().__init__(
            error_code=ErrorCode.ALL_UPLOADS_FAILED,
            message="Failed to upload all images",
            status_code=500,
            details={"attempted": count},
        )


class InternalError(AppException):
    """Unexpected failure that must not leak internal detail."""

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(
            error_code=ErrorCode.INTERNAL_ERROR,
            message=message,
            status_code=500,
        )
