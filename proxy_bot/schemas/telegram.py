from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class TelegramUser(BaseModel):
    id: int
    is_bot: bool = False
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None


class TelegramChat(BaseModel):
    id: int
    type: str = ""  # private, group, supergroup, channel
    title: Optional[str] = None
    username: Optional[str] = None


class TelegramVideo(BaseModel):
    file_id: str
    file_unique_id: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None


class TelegramDocument(BaseModel):
    file_id: str
    file_unique_id: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None

    @property
    def is_video(self) -> bool:
        return bool(self.mime_type and self.mime_type.startswith("video/"))


class TelegramMessageEntity(BaseModel):
    type: str  # mention, text_mention, url, bot_command, ...
    offset: int
    length: int
    user: Optional[TelegramUser] = None  # only for text_mention
    url: Optional[str] = None


class TelegramMessage(BaseModel):
    message_id: int
    date: int = 0
    chat: TelegramChat
    # "from" is reserved in Python
    from_user: Optional[TelegramUser] = Field(
        default=None,
        validation_alias=AliasChoices("from", "from_user"),
    )
    text: Optional[str] = None
    caption: Optional[str] = None
    entities: Optional[list[TelegramMessageEntity]] = None
    caption_entities: Optional[list[TelegramMessageEntity]] = None
    video: Optional[TelegramVideo] = None
    document: Optional[TelegramDocument] = None
    reply_to_message: Optional["TelegramMessage"] = None

    @property
    def all_entities(self) -> list[TelegramMessageEntity]:
        return (self.entities or []) + (self.caption_entities or [])


TelegramMessage.model_rebuild()


class TelegramUpdate(BaseModel):
    update_id: int
    message: Optional[TelegramMessage] = None


class TelegramFile(BaseModel):
    file_id: str
    file_unique_id: Optional[str] = None
    file_size: Optional[int] = None
    file_path: Optional[str] = None


class TelegramFileLookup(BaseModel):
    """Outcome of getFile: ok with file metadata, or Telegram's error description."""

    ok: bool
    result: Optional[TelegramFile] = None
    description: Optional[str] = None
    status: Optional[int] = None


class TelegramWebhookResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
