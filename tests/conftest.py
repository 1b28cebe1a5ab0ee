from typing import Optional
from unittest.mock import AsyncMock

import pytest

from proxy_bot.schemas.telegram import TelegramFile, TelegramFileLookup, TelegramUpdate, TelegramUser
from proxy_bot.services.bot_identity import BotIdentityCache
from proxy_bot.services.n8n_client import DispatchResult
from proxy_bot.services.state_store import ChatStateStore
from proxy_bot.services.update_processor import TelegramUpdateProcessor

BOT_ID = 777000
BOT_USERNAME = "VideoRelayBot"
PRIVATE_CHAT_ID = 123456
GROUP_CHAT_ID = -1001234567890


class FakeRedis:
    def __init__(self):
        self.data = {}
        self.expiry = {}

    async def set(self, key: str, value: str, ex: int | None = None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def get(self, key: str):
        return self.data.get(key)

    async def delete(self, key: str):
        self.data.pop(key, None)
        return 1

    async def aclose(self):
        return None


@pytest.fixture
def telegram():
    """Telegram client double: every call succeeds unless a test overrides it."""
    mock = AsyncMock()
    mock.get_me.return_value = TelegramUser(id=BOT_ID, is_bot=True, first_name="Relay", username=BOT_USERNAME)
    mock.get_file.return_value = TelegramFileLookup(
        ok=True,
        result=TelegramFile(file_id="vid-1", file_path="videos/file_1.mp4", file_size=1048576),
        status=200,
    )
    mock.send_message.return_value = {"ok": True}
    mock.send_chat_action.return_value = {"ok": True}
    return mock


@pytest.fixture
def n8n():
    mock = AsyncMock()
    mock.send_video.return_value = DispatchResult(ok=True, status_code=200, body_text='{"ok":true}')
    return mock


@pytest.fixture
def store():
    return ChatStateStore()


@pytest.fixture
def processor(store, telegram, n8n):
    return TelegramUpdateProcessor(store, telegram, n8n, BotIdentityCache(telegram))


def make_update(
    *,
    chat_id: int = PRIVATE_CHAT_ID,
    chat_type: str = "private",
    text: Optional[str] = None,
    caption: Optional[str] = None,
    video_id: Optional[str] = None,
    document: Optional[dict] = None,
    entities: Optional[list] = None,
    reply_to: Optional[dict] = None,
    message_id: int = 10,
) -> TelegramUpdate:
    message = {
        "message_id": message_id,
        "date": 1702000000,
        "chat": {"id": chat_id, "type": chat_type},
        "from": {"id": 42, "is_bot": False, "first_name": "Sara", "username": "sara", "language_code": "fa"},
    }
    if text is not None:
        message["text"] = text
    if caption is not None:
        message["caption"] = caption
    if video_id is not None:
        message["video"] = {"file_id": video_id, "file_unique_id": f"u-{video_id}", "duration": 12}
    if document is not None:
        message["document"] = document
    if entities is not None:
        message["entities"] = entities
    if reply_to is not None:
        message["reply_to_message"] = reply_to
    return TelegramUpdate(**{"update_id": 1, "message": message})


def sent_texts(telegram) -> list[str]:
    return [call.args[1] for call in telegram.send_message.await_args_list]
