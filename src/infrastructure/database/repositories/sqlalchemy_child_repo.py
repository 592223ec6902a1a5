"""SQLAlchemy implementation of Child repository."""

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateEmailError
from domain.entities.child import Child, normalize_email, validate_age, validate_name
from infrastructure.database.models import ChildModel


class SQLAlchemyChildRepository:
    """SQLAlchemy implementation of IChildRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Child | None:
        """Get a child by ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def find_one(
        self, name: str | None = None, email: str | None = None
    ) -> Child | None:
        """Get the first child matching the name OR the email."""
        conditions = []
        if name:
            conditions.append(ChildModel.name == name.strip())
        if email:
            conditions.append(ChildModel.email == normalize_email(email))
        if not conditions:
            return None

        stmt = (
            select(ChildModel)
            .where(or_(*conditions))
            .order_by(ChildModel.created_at)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model, include_password=True) if model else None

    async def get_by_email(self, email: str) -> Child | None:
        """Get a child by email."""
        stmt = select(ChildModel).where(ChildModel.email == normalize_email(email))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_all(self) -> list[Child]:
        """Get all children, oldest first."""
        stmt = select(ChildModel).order_by(ChildModel.created_at)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, child: Child) -> Child:
        """Create a new child."""
        model = self._to_model(child)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateEmailError(child.email) from e
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(
        self, id: UUID, name: str | None = None, age: int | None = None
    ) -> Child | None:
        """Update name and/or age, validating before writing."""
        model = await self._get_model(id)
        if not model:
            return None

        if name is not None:
            model.name = validate_name(name)
        if age is not None:
            model.age = validate_age(age)

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> Child | None:
        """Delete a child."""
        model = await self._get_model(id)
        if not model:
            return None

        child = self._to_entity(model)
        await self._session.delete(model)
        await self._session.flush()
        return child

    async def _get_model(self, id: UUID) -> ChildModel | None:
        stmt = select(ChildModel).where(ChildModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: ChildModel, include_password: bool = False) -> Child:
        """Convert ORM model to domain entity."""
        return Child(
            id=model.id,
            name=model.name,
            age=model.age,
            email=model.email,
            images=list(model.images or []),
            password_hash=model.password_hash if include_password else None,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Child) -> ChildModel:
        """Convert domain entity to ORM model."""
        return ChildModel(
            id=entity.id,
            name=entity.name,
            age=entity.age,
            email=normalize_email(entity.email),
            password_hash=entity.password_hash,
            images=list(entity.images),
            created_at=entity.created_at,
        )
