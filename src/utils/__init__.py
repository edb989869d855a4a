"""Utility modules for the TaskFlow API."""

from .datetime_utils import (
    utcnow,
    get_local_tz,
    to_naive_utc,
    to_local,
    format_deadline,
)

from .background_tasks import (
    create_safe_task,
    safe_background_task,
    wait_for_background_tasks,
)

__all__ = [
    # Datetime utilities
    "utcnow",
    "get_local_tz",
    "to_naive_utc",
    "to_local",
    "format_deadline",
    # Background tasks
    "create_safe_task",
    "safe_background_task",
    "wait_for_background_tasks",
]
