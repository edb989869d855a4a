"""
Database module for the TaskFlow API.

Handles:
- Users, employees, tasks (with history) and notification configs
- Async engine/session lifecycle
- Owner-scoped repositories
"""

from .connection import (
    Database,
    normalize_database_url,
)
from .models import (
    Base,
    UserDB,
    EmployeeDB,
    TaskDB,
    TaskHistoryDB,
    ConfigDB,
    UserRoleEnum,
    TaskPriorityEnum,
    TaskStatusEnum,
    HistoryActionEnum,
)

__all__ = [
    "Database",
    "normalize_database_url",
    "Base",
    "UserDB",
    "EmployeeDB",
    "TaskDB",
    "TaskHistoryDB",
    "ConfigDB",
    "UserRoleEnum",
    "TaskPriorityEnum",
    "TaskStatusEnum",
    "HistoryActionEnum",
]
