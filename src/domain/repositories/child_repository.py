"""Child repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.child import Child


class IChildRepository(Protocol):
    """Repository interface for Child entities."""

    async def get(self, id: UUID) -> Child | None:
        """Get a child by ID (password hash excluded)."""
        ...

    async def find_one(
        self, name: str | None = None, email: str | None = None
    ) -> Child | None:
        """Get the first child whose name OR email matches.

        The returned entity carries its password hash so that credentials
        can be checked. Callers strip it before returning it outward.
        """
        ...

    async def get_by_email(self, email: str) -> Child | None:
        """Get a child by email."""
        ...

    async def list_all(self) -> list[Child]:
        """Get all children (password hash excluded)."""
        ...

    async def create(self, child: Child) -> Child:
        """Create a new child. Raises DuplicateEmailError on conflict."""
        ...

    async def update(
        self, id: UUID, name: str | None = None, age: int | None = None
    ) -> Child | None:
        """Update name and/or age. Returns None if the child does not exist."""
        ...

    async def delete(self, id: UUID) -> Child | None:
        """Delete a child and return the removed record, if any."""
        ...
