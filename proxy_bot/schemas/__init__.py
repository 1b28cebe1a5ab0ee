from proxy_bot.schemas.chat_state import ChatState
from proxy_bot.schemas.submission import SubmissionPayload
from proxy_bot.schemas.telegram import TelegramMessage, TelegramUpdate, TelegramWebhookResponse

__all__ = ["ChatState", "SubmissionPayload", "TelegramMessage", "TelegramUpdate", "TelegramWebhookResponse"]
