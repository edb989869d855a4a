"""
Task service.

Handles business logic for:
- Assignee validation (the employee must belong to the caller)
- Change history on every update
- Completion bookkeeping (completedAt, metrics)
- Telegram notifications on creation and on transition into completed
"""

import logging
from typing import Optional, List, Dict, Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import TaskDB, EmployeeDB, TaskStatusEnum
from ..database.exceptions import ValidationError
from ..database.repositories import (
    ConfigRepository,
    EmployeeRepository,
    TaskRepository,
)
from ..integrations.telegram import (
    TelegramNotifier,
    format_new_task_message,
    format_task_completed_message,
)
from ..monitoring import tasks_created_total, tasks_completed_total
from ..utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

COMPLETED = TaskStatusEnum.COMPLETED.value


class TaskService:
    """Service for the caller's tasks."""

    def __init__(
        self,
        session: AsyncSession,
        owner_id: int,
        notifier: Optional[TelegramNotifier] = None,
    ):
        self.session = session
        self.owner_id = owner_id
        self.notifier = notifier
        self.tasks = TaskRepository(session, owner_id)
        self.employees = EmployeeRepository(session, owner_id)
        self.configs = ConfigRepository(session, owner_id)

    async def _assignee(self, employee_id: int) -> EmployeeDB:
        employee = await self.employees.get(employee_id)
        if employee is None:
            raise ValidationError(f"Employee {employee_id} not found")
        return employee

    async def _notify(self, task: TaskDB, kind: str) -> None:
        """Dispatch a notification if the caller configured Telegram."""
        if self.notifier is None:
            return

        config = await self.configs.find()
        if config is None or not config.is_configured:
            logger.debug(f"Telegram not configured for user {self.owner_id}, skipping {kind} notification")
            return

        if kind == "completed":
            text = format_task_completed_message(task)
        else:
            text = format_new_task_message(task)

        self.notifier.dispatch(config.bot_token, config.chat_id, text, kind)

    async def list(
        self,
        status: Optional[str] = None,
        employee_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[TaskDB]:
        return await self.tasks.list_filtered(status=status, employee_id=employee_id, search=search)

    async def get(self, task_id: int) -> TaskDB:
        return await self.tasks.get_or_raise(task_id)

    async def create(self, fields: Dict[str, Any]) -> TaskDB:
        """
        Create a task and announce it.

        Raises:
            ValidationError: if the assignee is not one of the caller's employees
        """
        fields = dict(fields)
        fields["employee"] = await self._assignee(fields["employee_id"])

        if fields.get("status") == COMPLETED and not fields.get("completed_at"):
            fields["completed_at"] = utcnow()

        task = await self.tasks.create(fields)
        await self.session.commit()

        tasks_created_total.labels(priority=task.priority).inc()
        await self._notify(task, "created")
        return task

    async def update(
        self,
        task_id: int,
        changes: Dict[str, Any],
        submitted: Dict[str, Any],
    ) -> TaskDB:
        """
        Apply a partial update and record it in the task history.

        Args:
            task_id: Task to update
            changes: Model attribute values from the request
            submitted: The request body delta as the client sent it

        Raises:
            EntityNotFoundError: if the task is not the caller's
            ValidationError: if a new assignee is not one of the caller's employees
        """
        task = await self.tasks.get_or_raise(task_id)
        previous_status = task.status

        changes = dict(changes)
        if "employee_id" in changes:
            changes["employee"] = await self._assignee(changes["employee_id"])

        became_completed = (
            changes.get("status") == COMPLETED and previous_status != COMPLETED
        )
        if became_completed and not changes.get("completed_at"):
            changes["completed_at"] = utcnow()

        task = await self.tasks.update_with_history(task_id, changes, submitted)
        await self.session.commit()

        if became_completed:
            tasks_completed_total.inc()
            await self._notify(task, "completed")
        return task

    async def delete(self, task_id: int) -> None:
        await self.tasks.delete(task_id)
        await self.session.commit()
