"""
External integrations.

- Telegram: task notifications via the Bot API
"""

from .telegram import (
    TelegramNotifier,
    NotificationResult,
    TEST_MESSAGE,
    format_new_task_message,
    format_task_completed_message,
)

__all__ = [
    "TelegramNotifier",
    "NotificationResult",
    "TEST_MESSAGE",
    "format_new_task_message",
    "format_task_completed_message",
]
