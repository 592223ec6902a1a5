"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.child import Child


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked child repository."""

    def __init__(self) -> None:
        self.children = AsyncMock()
        self.children.get_by_email.return_value = None
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def child_id() -> UUID:
    """A random child ID."""
    return uuid4()


@pytest.fixture
def child(child_id: UUID) -> Child:
    """A stored child without images."""
    return Child(id=child_id, name="Sara", age=7, email="sara@example.com")
