"""Outbound payload posted to the n8n workflow, and the metadata rules YouTube imposes on it."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from proxy_bot.schemas.chat_state import DESCRIPTION_MAX_LENGTH, MAX_TAGS, TITLE_MAX_LENGTH
from proxy_bot.schemas.telegram import TelegramUser


class SubmitterInfo(BaseModel):
    id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    language_code: Optional[str] = None

    @classmethod
    def from_user(cls, user: Optional[TelegramUser]) -> Optional["SubmitterInfo"]:
        if user is None:
            return None
        return cls(
            id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            language_code=user.language_code,
        )


class VideoRef(BaseModel):
    file_id: str
    file_path: Optional[str] = None
    file_size: Optional[int] = None


class SubmissionPayload(BaseModel):
    chat_id: int
    from_user: Optional[SubmitterInfo] = Field(default=None, serialization_alias="from")
    message_id: Optional[int] = None
    date: Optional[int] = None
    video: VideoRef
    title: str
    description: str
    tags: list[str]
    source_link: Optional[str] = None
    channel: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def validate_video_metadata(
    title: Optional[str],
    description: Optional[str],
    tags: Optional[list[str]],
) -> list[str]:
    """Return the list of problems with the metadata, empty when it can be published."""
    errors: list[str] = []
    if not title or not title.strip():
        errors.append("عنوان الزامی است")
    if not description or not description.strip():
        errors.append("توضیحات الزامی است")
    if not tags:
        errors.append("حداقل یک تگ لازم است")
    if len(title or "") > TITLE_MAX_LENGTH:
        errors.append(f"عنوان حداکثر {TITLE_MAX_LENGTH} کاراکتر")
    if len(description or "") > DESCRIPTION_MAX_LENGTH:
        errors.append(f"توضیحات حداکثر {DESCRIPTION_MAX_LENGTH} کاراکتر")
    if len(tags or []) > MAX_TAGS:
        errors.append(f"حداکثر {MAX_TAGS} تگ مجاز است")
    return errors
