"""
Employee management for the calling user.
"""

import logging
from typing import List, Dict, Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import EmployeeDB
from ..database.exceptions import ConflictError
from ..database.repositories import EmployeeRepository, TaskRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Service for the caller's employees."""

    def __init__(self, session: AsyncSession, owner_id: int):
        self.session = session
        self.owner_id = owner_id
        self.employees = EmployeeRepository(session, owner_id)
        self.tasks = TaskRepository(session, owner_id)

    async def list(self) -> List[EmployeeDB]:
        return await self.employees.list()

    async def create(self, fields: Dict[str, Any]) -> EmployeeDB:
        employee = await self.employees.create(fields)
        await self.session.commit()
        return employee

    async def update(self, employee_id: int, changes: Dict[str, Any]) -> EmployeeDB:
        employee = await self.employees.update(employee_id, changes)
        await self.session.commit()
        return employee

    async def delete(self, employee_id: int) -> None:
        """
        Delete an employee.

        Raises:
            EntityNotFoundError: if the employee is not the caller's
            ConflictError: if tasks are still assigned to the employee
        """
        await self.employees.get_or_raise(employee_id)

        assigned = await self.tasks.count_for_employee(employee_id)
        if assigned:
            raise ConflictError("Cannot delete an employee with active tasks")

        await self.employees.delete(employee_id)
        await self.session.commit()
