"""
Telegram notification settings for the calling user.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.exceptions import ValidationError
from ..database.repositories import ConfigRepository, NotificationConfig
from ..integrations.telegram import TelegramNotifier, NotificationResult, TEST_MESSAGE

logger = logging.getLogger(__name__)


class BotConfigService:
    """Service for reading, saving and testing Telegram credentials."""

    def __init__(self, session: AsyncSession, owner_id: int, notifier: TelegramNotifier):
        self.session = session
        self.owner_id = owner_id
        self.notifier = notifier
        self.configs = ConfigRepository(session, owner_id)

    async def get(self) -> NotificationConfig:
        """Caller's config; an empty one is created on first access."""
        config = await self.configs.get_or_create()
        await self.session.commit()
        return config

    async def update(self, bot_token: Optional[str], chat_id: Optional[str]) -> NotificationConfig:
        config = await self.configs.upsert(bot_token, chat_id)
        await self.session.commit()
        return config

    async def send_test(self, bot_token: Optional[str], chat_id: Optional[str]) -> NotificationResult:
        """
        Send the test message synchronously with the given credentials.

        Raises:
            ValidationError: if either credential is missing
        """
        if not bot_token or not chat_id:
            raise ValidationError("Bot token and chat ID are required")

        result = await self.notifier.deliver(bot_token, chat_id, TEST_MESSAGE, "test")
        logger.info(f"Test notification for user {self.owner_id}: success={result.success}")
        return result
