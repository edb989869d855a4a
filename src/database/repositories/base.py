"""
Owner-scoped repository base.

Every Employee/Task/Config query goes through ``OwnedRepository`` so that the
``user_id == owner_id`` filter is applied in exactly one place. A record owned
by someone else behaves exactly like a missing record.
"""

import logging
from typing import Optional, List, Dict, Any, Generic, Type, TypeVar

from sqlalchemy import select, func, Select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Base
from ..exceptions import (
    DatabaseConstraintError,
    DatabaseOperationError,
    EntityNotFoundError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class OwnedRepository(Generic[ModelT]):
    """CRUD for records that belong to a single user."""

    model: Type[ModelT]
    entity_name: str = "Record"

    def __init__(self, session: AsyncSession, owner_id: int):
        self.session = session
        self.owner_id = owner_id

    def _scoped(self) -> Select:
        """SELECT restricted to the caller's records."""
        return select(self.model).where(self.model.user_id == self.owner_id)

    def _newest_first(self, stmt: Select) -> Select:
        return stmt.order_by(self.model.created_at.desc(), self.model.id.desc())

    async def list(self) -> List[ModelT]:
        """All records owned by the caller, newest first."""
        result = await self.session.execute(self._newest_first(self._scoped()))
        return list(result.scalars().all())

    async def get(self, record_id: int) -> Optional[ModelT]:
        """Get a record by id, or None if absent or owned by someone else."""
        result = await self.session.execute(
            self._scoped().where(self.model.id == record_id)
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, record_id: int) -> ModelT:
        record = await self.get(record_id)
        if record is None:
            raise EntityNotFoundError(f"{self.entity_name} {record_id} not found")
        return record

    async def count(self, *criteria) -> int:
        """Count the caller's records matching extra criteria."""
        result = await self.session.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.user_id == self.owner_id, *criteria)
        )
        return result.scalar_one()

    async def create(self, fields: Dict[str, Any]) -> ModelT:
        """Create a record owned by the caller. Any user_id in fields is ignored."""
        fields = {k: v for k, v in fields.items() if k not in ("id", "user_id")}
        record = self.model(user_id=self.owner_id, **fields)
        try:
            self.session.add(record)
            await self.session.flush()
        except IntegrityError as e:
            logger.error(f"Constraint violation creating {self.entity_name}: {e}")
            raise DatabaseConstraintError(f"Cannot create {self.entity_name}: constraint violation")
        except SQLAlchemyError as e:
            logger.error(f"CRITICAL: {self.entity_name} creation failed: {e}", exc_info=True)
            raise DatabaseOperationError(f"Failed to create {self.entity_name}: {e}")

        logger.info(f"Created {self.entity_name} {record.id} for user {self.owner_id}")
        return record

    async def update(self, record_id: int, changes: Dict[str, Any]) -> ModelT:
        """Apply field changes to a caller-owned record."""
        record = await self.get_or_raise(record_id)
        self.apply(record, changes)
        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.error(f"Constraint violation updating {self.entity_name} {record_id}: {e}")
            raise DatabaseConstraintError(f"Cannot update {self.entity_name} {record_id}: constraint violation")
        except SQLAlchemyError as e:
            logger.error(f"CRITICAL: {self.entity_name} update failed for {record_id}: {e}", exc_info=True)
            raise DatabaseOperationError(f"Failed to update {self.entity_name} {record_id}: {e}")
        return record

    def apply(self, record: ModelT, changes: Dict[str, Any]) -> None:
        """Merge changes into a loaded record. Ownership and ids never change."""
        for field, value in changes.items():
            if field in ("id", "user_id"):
                continue
            setattr(record, field, value)

    async def delete(self, record_id: int) -> None:
        """Delete a caller-owned record."""
        record = await self.get_or_raise(record_id)
        try:
            await self.session.delete(record)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"CRITICAL: {self.entity_name} deletion failed for {record_id}: {e}", exc_info=True)
            raise DatabaseOperationError(f"Failed to delete {self.entity_name} {record_id}: {e}")

        logger.info(f"Deleted {self.entity_name} {record_id} for user {self.owner_id}")
