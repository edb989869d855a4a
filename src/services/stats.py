"""
Task statistics for the calling user's dashboard.
"""

from datetime import datetime
from typing import Optional, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import TaskStatusEnum
from ..database.repositories import TaskRepository
from ..utils.datetime_utils import utcnow


class StatsService:
    """Counts over the caller's full task set, computed on every request."""

    def __init__(self, session: AsyncSession, owner_id: int):
        self.tasks = TaskRepository(session, owner_id)

    async def get_stats(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """
        Returns:
            total, new, in_progress, completed and overdue counts
        """
        by_status = await self.tasks.count_by_status()
        overdue = await self.tasks.count_overdue(now or utcnow())

        return {
            "total": sum(by_status.values()),
            "new": by_status.get(TaskStatusEnum.NEW.value, 0),
            "in_progress": by_status.get(TaskStatusEnum.IN_PROGRESS.value, 0),
            "completed": by_status.get(TaskStatusEnum.COMPLETED.value, 0),
            "overdue": overdue,
        }
