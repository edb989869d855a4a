"""
Services for business logic.
"""

from .auth import AuthService
from .employees import EmployeeService
from .tasks import TaskService
from .stats import StatsService
from .bot_config import BotConfigService

__all__ = [
    "AuthService",
    "EmployeeService",
    "TaskService",
    "StatsService",
    "BotConfigService",
]
