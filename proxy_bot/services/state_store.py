"""
Chat state store: Redis-backed per-chat wizard state with a retention window.
Falls back to an in-process dict when Redis is not configured or fails.
"""

import time
from typing import Optional

import redis.asyncio as redis_async
from pydantic import ValidationError

from proxy_bot.logging_config import get_logger
from proxy_bot.schemas.chat_state import ChatState

logger = get_logger("state_store")

KEY_PREFIX = "chatstate:"


def build_redis_client(redis_url: Optional[str], socket_timeout_seconds: float = 2.0):
    """Create an asyncio Redis client, or None when no URL is configured."""
    if not redis_url:
        return None
    try:
        return redis_async.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout_seconds,
            socket_connect_timeout=socket_timeout_seconds,
        )
    except Exception as e:
        logger.warning(f"Redis unavailable, using in-memory state store: {e}")
        return None


class ChatStateStore:
    def __init__(self, redis_client=None, ttl_seconds: int = 60 * 60 * 24 * 2, clock=time.monotonic):
        self._redis = redis_client
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._memory: dict[int, tuple[float, str]] = {}

    @staticmethod
    def key(chat_id: int) -> str:
        return f"{KEY_PREFIX}{chat_id}"

    async def get(self, chat_id: int) -> Optional[ChatState]:
        if self._redis:
            try:
                raw = await self._redis.get(self.key(chat_id))
                return self._decode(chat_id, raw)
            except Exception as e:
                logger.error(f"Redis get error: {e}", extra={"context": {"chat_id": chat_id}})

        entry = self._memory.get(chat_id)
        if entry is None:
            return None
        expires_at, raw = entry
        if self._clock() >= expires_at:
            self._memory.pop(chat_id, None)
            return None
        return self._decode(chat_id, raw)

    async def save(self, state: ChatState) -> None:
        payload = state.to_json()
        if self._redis:
            try:
                await self._redis.set(self.key(state.chat_id), payload, ex=self.ttl_seconds)
                return
            except Exception as e:
                logger.error(f"Redis set error: {e}", extra={"context": {"chat_id": state.chat_id}})
        self._memory[state.chat_id] = (self._clock() + self.ttl_seconds, payload)

    async def delete(self, chat_id: int) -> None:
        if self._redis:
            try:
                await self._redis.delete(self.key(chat_id))
                return
            except Exception as e:
                logger.error(f"Redis delete error: {e}", extra={"context": {"chat_id": chat_id}})
        self._memory.pop(chat_id, None)

    async def close(self) -> None:
        if self._redis:
            await self._redis.aclose()

    def _decode(self, chat_id: int, raw) -> Optional[ChatState]:
        if not raw:
            return None
        try:
            return ChatState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Malformed chat state ignored",
                extra={"context": {"chat_id": chat_id, "error": str(e)}},
            )
            return None
