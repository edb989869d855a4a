"""
Telegram integration for task notifications.

Sends HTML-formatted messages through the Bot API ``sendMessage`` method
using the bot token and chat id the user stored in their config.

Delivery is best effort: ``send_message`` never raises and reports the
outcome as a ``NotificationResult``; ``dispatch`` schedules a send off the
request path so a slow or failing Telegram never affects the API response.
"""

import html
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple
import aiohttp
import asyncio

from config import settings
from ..database.models import TaskDB, EmployeeDB, TaskPriorityEnum
from ..monitoring import record_notification
from ..utils.background_tasks import create_safe_task
from ..utils.datetime_utils import format_deadline

logger = logging.getLogger(__name__)


TEST_MESSAGE = "🎉 <b>Test message</b>\n\nTelegram integration is working!"

PRIORITY_LABELS = {
    TaskPriorityEnum.HIGH.value: "High",
    TaskPriorityEnum.MEDIUM.value: "Medium",
    TaskPriorityEnum.LOW.value: "Low",
}


@dataclass
class NotificationResult:
    """Outcome of one sendMessage call."""
    success: bool
    error: Optional[str] = None


class TelegramNotifier:
    """
    Outbound Telegram Bot API client.

    One instance is shared by the application (``app.state.notifier``); it
    holds no per-user state, the credentials come with each call.
    """

    def __init__(self, api_base: Optional[str] = None, timeout: Optional[float] = None):
        self.api_base = (api_base or settings.telegram_api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.telegram_timeout_seconds

    async def _post(self, url: str, payload: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """POST JSON and return (status, decoded body)."""
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, json=payload) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    data = {}
                return response.status, data if isinstance(data, dict) else {}

    async def send_message(self, bot_token: str, chat_id: str, text: str) -> NotificationResult:
        """
        Send one message.

        Returns:
            NotificationResult; ``error`` carries Telegram's ``description``
            when the API answered, else the transport error text.
        """
        url = f"{self.api_base}/bot{bot_token}/sendMessage"
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "HTML",
        }

        try:
            status, data = await self._post(url, payload)
        except asyncio.TimeoutError:
            logger.error(f"Telegram request timed out after {self.timeout}s")
            return NotificationResult(success=False, error=f"Request timed out after {self.timeout:g}s")
        except aiohttp.ClientError as e:
            logger.error(f"Error sending Telegram message: {e}")
            return NotificationResult(success=False, error=str(e) or type(e).__name__)

        if status == 200 and data.get("ok", True):
            return NotificationResult(success=True)

        error = data.get("description") or f"Telegram API returned HTTP {status}"
        logger.warning(f"Telegram API error ({status}): {error}")
        return NotificationResult(success=False, error=error)

    async def deliver(self, bot_token: str, chat_id: str, text: str, kind: str) -> NotificationResult:
        """Send and record the outcome in metrics."""
        result = await self.send_message(bot_token, chat_id, text)
        record_notification(kind, result.success)
        if not result.success:
            logger.warning(f"Telegram {kind} notification not delivered: {result.error}")
        return result

    def dispatch(self, bot_token: str, chat_id: str, text: str, kind: str) -> asyncio.Task:
        """Schedule a delivery without waiting for it."""
        return create_safe_task(
            self.deliver(bot_token, chat_id, text, kind),
            f"telegram-{kind}-notification",
        )


# ==================== MESSAGE FORMATS ====================

def _assignee(employee: EmployeeDB) -> str:
    if employee.telegram_tag:
        return f"@{html.escape(employee.telegram_tag)}"
    return html.escape(employee.name)


def _hashtag(employee: EmployeeDB) -> str:
    tag = employee.telegram_tag or "".join(employee.name.split())
    return f"#{html.escape(tag)}"


def format_new_task_message(task: TaskDB) -> str:
    """Message sent when a task is created."""
    employee = task.employee
    priority = PRIORITY_LABELS.get(task.priority, task.priority)

    return (
        "🆕 <b>New task</b>\n\n"
        f"👤 Assignee: {_assignee(employee)}\n"
        f"📋 Task: {html.escape(task.title)}\n"
        f"📝 Description: {html.escape(task.description or '')}\n"
        f"⏰ Deadline: {format_deadline(task.deadline)}\n"
        f"🔥 Priority: {priority}\n\n"
        f"#task {_hashtag(employee)}"
    )


def format_task_completed_message(task: TaskDB) -> str:
    """Message sent when a task transitions into completed."""
    employee = task.employee
    result = task.result or "Not specified"

    return (
        "✅ <b>Task completed</b>\n\n"
        f"👤 Assignee: {_assignee(employee)}\n"
        f"📋 Task: {html.escape(task.title)}\n"
        f"✨ Result: {html.escape(result)}\n\n"
        f"#completed {_hashtag(employee)}"
    )
