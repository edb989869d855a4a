"""
Repository classes for database operations.

Each repository wraps one request-scoped session. Employee, task and config
repositories are additionally scoped to the calling user.
"""

from .base import OwnedRepository
from .users import UserRepository
from .employees import EmployeeRepository
from .tasks import TaskRepository
from .configs import ConfigRepository, NotificationConfig

__all__ = [
    "OwnedRepository",
    "UserRepository",
    "EmployeeRepository",
    "TaskRepository",
    "ConfigRepository",
    "NotificationConfig",
]
