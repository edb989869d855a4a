"""
Notification config repository (owner-scoped).

Each user has at most one config row. Reads create the row lazily and writes
are upserts; both use INSERT ... ON CONFLICT so that concurrent first requests
cannot race on the unique owner constraint.

Bot tokens are Fernet-encrypted on write and decrypted on read when
ENCRYPTION_KEY is set; otherwise they are stored as given.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.dialects import postgresql, sqlite

from .base import OwnedRepository
from ..models import ConfigDB
from ...utils.encryption import TokenEncryption, get_token_encryption

logger = logging.getLogger(__name__)


@dataclass
class NotificationConfig:
    """Decrypted view of a user's Telegram settings."""
    user_id: int
    bot_token: str = ""
    chat_id: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)


class ConfigRepository(OwnedRepository[ConfigDB]):
    """Repository for the caller's notification config."""

    model = ConfigDB
    entity_name = "Config"

    def __init__(self, session, owner_id: int, encryption: Optional[TokenEncryption] = None):
        super().__init__(session, owner_id)
        self.encryption = encryption or get_token_encryption()

    def _insert(self):
        """Dialect-specific INSERT supporting ON CONFLICT."""
        dialect = self.session.bind.dialect.name
        if dialect == "postgresql":
            return postgresql.insert(ConfigDB)
        if dialect == "sqlite":
            return sqlite.insert(ConfigDB)
        raise NotImplementedError(f"Config upsert not supported for dialect {dialect}")

    async def _load(self) -> ConfigDB:
        result = await self.session.execute(
            self._scoped().execution_options(populate_existing=True)
        )
        return result.scalar_one()

    def _to_view(self, config: ConfigDB) -> NotificationConfig:
        return NotificationConfig(
            user_id=config.user_id,
            bot_token=self.encryption.decrypt(config.bot_token) or "",
            chat_id=config.chat_id or "",
        )

    async def get_or_create(self) -> NotificationConfig:
        """Get the caller's config, creating an empty one if none exists."""
        stmt = (
            self._insert()
            .values(user_id=self.owner_id, bot_token="", chat_id="")
            .on_conflict_do_nothing(index_elements=["user_id"])
        )
        await self.session.execute(stmt)
        return self._to_view(await self._load())

    async def upsert(self, bot_token: Optional[str], chat_id: Optional[str]) -> NotificationConfig:
        """Create or replace the caller's Telegram credentials."""
        stmt = self._insert().values(
            user_id=self.owner_id,
            bot_token=self.encryption.encrypt(bot_token or ""),
            chat_id=chat_id or "",
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={
                "bot_token": stmt.excluded.bot_token,
                "chat_id": stmt.excluded.chat_id,
            },
        )
        await self.session.execute(stmt)
        logger.info(f"Saved notification config for user {self.owner_id}")
        return self._to_view(await self._load())

    async def find(self) -> Optional[NotificationConfig]:
        """Get the caller's config without creating one."""
        result = await self.session.execute(self._scoped())
        config = result.scalar_one_or_none()
        return self._to_view(config) if config else None
