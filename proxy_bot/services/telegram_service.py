from typing import Optional

import httpx

from proxy_bot.config import ConfigurationError
from proxy_bot.logging_config import get_logger
from proxy_bot.schemas.telegram import TelegramFile, TelegramFileLookup, TelegramUser

logger = get_logger("telegram_service")


class TelegramService:
    """Thin async client for the Telegram Bot API methods the bot needs."""

    BASE_URL = "{api_base}/bot{token}"

    def __init__(
        self,
        bot_token: str,
        api_base: str = "https://api.telegram.org",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not bot_token:
            raise ConfigurationError("TELEGRAM_BOT_TOKEN is required")
        self.bot_token = bot_token
        self.base_url = self.BASE_URL.format(api_base=api_base.rstrip("/"), token=bot_token)
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def _post(self, method: str, data: Optional[dict] = None) -> httpx.Response:
        url = f"{self.base_url}/{method}"
        return await self._client.post(url, json=data or {})

    async def _make_request(self, method: str, data: Optional[dict] = None) -> dict:
        """Make request to Telegram API. Errors are logged and returned, not raised."""
        try:
            response = await self._post(method, data)
            return response.json()
        except Exception as e:
            logger.error(f"Telegram API error: {e}", extra={"context": {"method": method}})
            return {"ok": False, "error": str(e)}

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_message_id: Optional[int] = None,
        parse_mode: Optional[str] = None,
        disable_web_page_preview: Optional[bool] = None,
        reply_markup: Optional[dict] = None,
    ) -> dict:
        """Send a message to a chat. Plain text unless parse_mode is given."""
        data = {
            "chat_id": chat_id,
            "text": text,
        }
        if reply_to_message_id:
            data["reply_to_message_id"] = reply_to_message_id
        if parse_mode:
            data["parse_mode"] = parse_mode
        if disable_web_page_preview is not None:
            data["disable_web_page_preview"] = disable_web_page_preview
        if reply_markup:
            data["reply_markup"] = reply_markup

        result = await self._make_request("sendMessage", data)
        if not result.get("ok"):
            logger.warning(
                "sendMessage failed",
                extra={"context": {"chat_id": chat_id, "description": result.get("description") or result.get("error")}},
            )
        return result

    async def send_chat_action(self, chat_id: int, action: str = "typing") -> dict:
        return await self._make_request("sendChatAction", {"chat_id": chat_id, "action": action})

    async def get_me(self) -> Optional[TelegramUser]:
        """Return the bot's own user, or None if Telegram could not be reached."""
        result = await self._make_request("getMe")
        if not result.get("ok") or not isinstance(result.get("result"), dict):
            logger.warning(f"getMe failed: {result}")
            return None
        return TelegramUser(**result["result"])

    async def get_file(self, file_id: str) -> TelegramFileLookup:
        """Resolve a file_id to its storage path and size."""
        try:
            response = await self._post("getFile", {"file_id": file_id})
        except Exception as e:
            logger.error(f"Telegram getFile error: {e}")
            return TelegramFileLookup(ok=False, description=str(e))

        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            return TelegramFileLookup(ok=False, description="Failed to parse getFile response", status=status)

        if not isinstance(body, dict):
            logger.warning(f"Unexpected getFile response: {body}")
            return TelegramFileLookup(ok=False, description="Unexpected getFile response", status=status)
        if body.get("ok") and isinstance(body.get("result"), dict):
            return TelegramFileLookup(ok=True, result=TelegramFile(**body["result"]), status=status)
        return TelegramFileLookup(ok=False, description=body.get("description"), status=status)
