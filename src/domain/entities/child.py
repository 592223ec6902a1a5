"""Child domain entities and pure validation rules."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from core.exceptions import ValidationError

MIN_AGE = 0
MAX_AGE = 18
MIN_PASSWORD_LENGTH = 6

EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})


@dataclass
class Child:
    """Domain entity for a child profile."""

    name: str
    age: int
    email: str
    id: UUID = field(default_factory=uuid4)
    images: list[str] = field(default_factory=list)
    password_hash: str | None = field(default=None, repr=False)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def without_password(self) -> "Child":
        """Copy of this child with the password hash stripped."""
        return Child(
            id=self.id,
            name=self.name,
            age=self.age,
            email=self.email,
            images=list(self.images),
            created_at=self.created_at,
        )


@dataclass(frozen=True, slots=True)
class ChildDraft:
    """Un-persisted input for creating a child."""

    name: str
    age: int | None
    email: str
    password: str | None = field(default=None, repr=False)


@dataclass(frozen=True, slots=True)
class UploadItem:
    """A single incoming image file."""

    filename: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data) if self.data else 0

    @property
    def is_eligible(self) -> bool:
        """Non-empty payload with an allowed image content type."""
        return self.size > 0 and self.content_type in ALLOWED_IMAGE_TYPES


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required", field="name")
    return name


def validate_age(age: int | None) -> int:
    if age is None:
        raise ValidationError("Age is required", field="age")
    if age < MIN_AGE:
        raise ValidationError("Age cannot be negative", field="age")
    if age > MAX_AGE:
        raise ValidationError(f"Age must be at most {MAX_AGE}", field="age")
    return age


def validate_email(email: str | None) -> str:
    email = normalize_email(email or "")
    if not email:
        raise ValidationError("Email is required", field="email")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please fill a valid email address", field="email")
    return email


def validate_draft(draft: ChildDraft, require_password: bool) -> ChildDraft:
    """Validate and normalize a draft before it is persisted.

    Under the password policy a password of at least six characters is
    mandatory. Under the identity-only policy a password must not be sent.
    """
    name = validate_name(draft.name)
    age = validate_age(draft.age)
    email = validate_email(draft.email)

    if require_password:
        if not draft.password:
            raise ValidationError("Password is required", field="password")
        if len(draft.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )
    elif draft.password is not None:
        raise ValidationError(
            "Passwords are not accepted by this service", field="password"
        )

    return ChildDraft(name=name, age=age, email=email, password=draft.password)
