"""
Task repository (owner-scoped).

Handles:
- Task CRUD with the assignee employee eagerly loaded
- Append-only history, written in the same transaction as the update
- Filtering for the task list
- Status counts for stats
"""

import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from sqlalchemy import select, func, or_, Select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from .base import OwnedRepository
from ..models import TaskDB, TaskHistoryDB, TaskStatusEnum, HistoryActionEnum
from ..exceptions import DatabaseConstraintError, DatabaseOperationError
from ...utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


class TaskRepository(OwnedRepository[TaskDB]):
    """Repository for the caller's tasks."""

    model = TaskDB
    entity_name = "Task"

    def _scoped(self) -> Select:
        return (
            super()._scoped()
            .options(
                selectinload(TaskDB.employee),
                selectinload(TaskDB.history),
            )
        )

    async def list_filtered(
        self,
        status: Optional[str] = None,
        employee_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[TaskDB]:
        """
        Caller's tasks, newest first, optionally filtered.

        Args:
            status: Exact status match
            employee_id: Assignee employee id
            search: Case-insensitive substring of title or description
        """
        stmt = self._scoped()

        if status:
            stmt = stmt.where(TaskDB.status == status)
        if employee_id is not None:
            stmt = stmt.where(TaskDB.employee_id == employee_id)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(TaskDB.title).like(pattern),
                    func.lower(func.coalesce(TaskDB.description, "")).like(pattern),
                )
            )

        result = await self.session.execute(self._newest_first(stmt))
        return list(result.scalars().all())

    async def create(self, fields: Dict[str, Any]) -> TaskDB:
        """Create a task with an empty history."""
        fields = dict(fields)
        fields["history"] = []
        return await super().create(fields)

    async def update_with_history(
        self,
        task_id: int,
        changes: Dict[str, Any],
        submitted: Dict[str, Any],
    ) -> TaskDB:
        """
        Apply changes and append one history entry, in the caller's transaction.

        Args:
            task_id: Task to update
            changes: Model attribute values to set
            submitted: Raw field delta as sent by the client, stored verbatim
        """
        task = await self.get_or_raise(task_id)

        now = utcnow()
        self.apply(task, changes)
        task.updated_at = now
        task.history.append(
            TaskHistoryDB(
                timestamp=now,
                action=HistoryActionEnum.UPDATED.value,
                changes=submitted,
            )
        )

        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.error(f"Constraint violation updating Task {task_id}: {e}")
            raise DatabaseConstraintError(f"Cannot update Task {task_id}: constraint violation")
        except SQLAlchemyError as e:
            logger.error(f"CRITICAL: Task update failed for {task_id}: {e}", exc_info=True)
            raise DatabaseOperationError(f"Failed to update Task {task_id}: {e}")

        logger.info(f"Updated task {task_id} ({len(task.history)} history entries)")
        return task

    async def count_for_employee(self, employee_id: int) -> int:
        """Number of the caller's tasks assigned to an employee."""
        return await self.count(TaskDB.employee_id == employee_id)

    async def count_by_status(self) -> Dict[str, int]:
        """Task counts grouped by status."""
        result = await self.session.execute(
            select(TaskDB.status, func.count())
            .where(TaskDB.user_id == self.owner_id)
            .group_by(TaskDB.status)
        )
        return {status: count for status, count in result.all()}

    async def count_overdue(self, now: datetime) -> int:
        """Tasks not completed whose deadline is strictly before now."""
        return await self.count(
            TaskDB.status != TaskStatusEnum.COMPLETED.value,
            TaskDB.deadline < now,
        )
