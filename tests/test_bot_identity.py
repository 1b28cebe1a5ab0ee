from unittest.mock import AsyncMock

import pytest

from proxy_bot.schemas.telegram import TelegramUser
from proxy_bot.services.bot_identity import BotIdentity, BotIdentityCache


class TestBotIdentityCache:
    @pytest.mark.asyncio
    async def test_resolves_once(self):
        telegram = AsyncMock()
        telegram.get_me.return_value = TelegramUser(id=1, is_bot=True, username="RelayBot")
        cache = BotIdentityCache(telegram)

        first = await cache.get()
        second = await cache.get()

        assert first == BotIdentity(id=1, username="RelayBot")
        assert second is first
        assert telegram.get_me.await_count == 1

    @pytest.mark.asyncio
    async def test_failure_returns_none_and_retries(self):
        telegram = AsyncMock()
        telegram.get_me.side_effect = [RuntimeError("network"), TelegramUser(id=1, is_bot=True, username="RelayBot")]
        cache = BotIdentityCache(telegram)

        assert await cache.get() is None
        assert (await cache.get()).username == "RelayBot"

    @pytest.mark.asyncio
    async def test_incomplete_identity_is_not_cached(self):
        telegram = AsyncMock()
        telegram.get_me.return_value = TelegramUser(id=1, is_bot=True)
        cache = BotIdentityCache(telegram)

        identity = await cache.get()
        await cache.get()

        assert identity.handle is None
        assert telegram.get_me.await_count == 2


def test_handle():
    assert BotIdentity(id=1, username="RelayBot").handle == "@RelayBot"
