"""Mention detection and video selection for group messages."""

from typing import Optional

from proxy_bot.schemas.telegram import TelegramMessage, TelegramMessageEntity
from proxy_bot.services.bot_identity import BotIdentity

GROUP_CHAT_TYPES = {"group", "supergroup"}


def is_group_chat(message: TelegramMessage) -> bool:
    return message.chat.type in GROUP_CHAT_TYPES


def entity_text(text: str, entity: TelegramMessageEntity) -> str:
    """Slice an entity out of text. Telegram offsets count UTF-16 code units."""
    encoded = text.encode("utf-16-le")
    start = entity.offset * 2
    end = (entity.offset + entity.length) * 2
    return encoded[start:end].decode("utf-16-le", errors="ignore")


def is_bot_mentioned(message: TelegramMessage, identity: Optional[BotIdentity]) -> bool:
    if identity is None or (not identity.username and not identity.id):
        return False

    handle = identity.handle.lower() if identity.handle else None
    text = message.text or message.caption or ""

    for entity in message.all_entities:
        if entity.type == "text_mention" and identity.id and entity.user and entity.user.id == identity.id:
            return True
        if entity.type == "mention" and handle and text:
            if entity_text(text, entity).lower() == handle:
                return True

    # Fallback for clients that send no entity metadata.
    if handle and text:
        return handle in text.lower()
    return False


def video_file_id(message: Optional[TelegramMessage]) -> Optional[str]:
    """file_id of the message's video, or of a document whose mime type is video/*."""
    if message is None:
        return None
    if message.video and message.video.file_id:
        return message.video.file_id
    if message.document and message.document.is_video:
        return message.document.file_id
    return None


def select_video_file_id(message: TelegramMessage, has_source_link: bool) -> Optional[str]:
    """Pick the video a group submission refers to.

    With a source link the video must come from the replied-to message, so an
    externally referenced post is never confused with an attachment. Otherwise
    the replied-to video wins over one attached to the current message.
    """
    replied = video_file_id(message.reply_to_message)
    if has_source_link:
        return replied
    return replied or video_file_id(message)
