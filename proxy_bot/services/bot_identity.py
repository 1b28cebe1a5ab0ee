from dataclasses import dataclass
from typing import Optional

from proxy_bot.logging_config import get_logger

logger = get_logger("bot_identity")


@dataclass(frozen=True)
class BotIdentity:
    id: Optional[int] = None
    username: Optional[str] = None

    @property
    def handle(self) -> Optional[str]:
        return f"@{self.username}" if self.username else None


class BotIdentityCache:
    """Resolves the bot's id and username via getMe once per process. Never invalidated."""

    def __init__(self, telegram):
        self._telegram = telegram
        self._identity: Optional[BotIdentity] = None

    async def get(self) -> Optional[BotIdentity]:
        if self._identity is not None:
            return self._identity
        try:
            me = await self._telegram.get_me()
        except Exception as e:
            logger.warning(f"Bot identity resolution failed: {e}")
            return None
        if me is None:
            return None
        identity = BotIdentity(id=me.id or None, username=me.username or None)
        # Incomplete identities are retried on the next update.
        if identity.id and identity.username:
            self._identity = identity
        return identity
