import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from proxy_bot.services.state_machine import WizardStep, parse_step

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 5000
MAX_TAGS = 30


def now_ms() -> int:
    return int(time.time() * 1000)


class ChatState(BaseModel):
    """Wizard progress of one private chat, persisted between updates."""

    chat_id: int = Field(alias="chatId")
    # Raw string so that unknown values read from storage survive and can be purged.
    step: str
    video_file_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[list[str]] = None
    updated_at: int = Field(default_factory=now_ms, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def start(cls, chat_id: int, step: WizardStep = WizardStep.AWAITING_VIDEO, **fields) -> "ChatState":
        return cls(chat_id=chat_id, step=step.value, **fields)

    @property
    def wizard_step(self) -> Optional[WizardStep]:
        return parse_step(self.step)

    def touch(self) -> None:
        self.updated_at = now_ms()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
