import hmac
import json
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from proxy_bot.config import settings
from proxy_bot.logging_config import get_logger
from proxy_bot.schemas.telegram import TelegramUpdate, TelegramWebhookResponse
from proxy_bot.services.update_processor import TelegramUpdateProcessor

logger = get_logger("telegram_webhook")

router = APIRouter()

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def get_processor(request: Request) -> Optional[TelegramUpdateProcessor]:
    return getattr(request.app.state, "processor", None)


def _respond(status_code: int, ok: bool, error: Optional[str] = None) -> JSONResponse:
    body = TelegramWebhookResponse(ok=ok, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def is_secret_valid(provided: Optional[str]) -> bool:
    expected = settings.telegram_secret_token
    if not expected:
        return True
    return provided is not None and hmac.compare_digest(provided, expected)


async def parse_telegram_update(request: Request) -> Optional[dict]:
    """
    Parse Telegram update with tolerant decoding to avoid utf-8 crashes.
    Returns dict or None.
    """
    try:
        return await request.json()
    except Exception as e:
        logger.warning(f"Standard request.json() failed: {e}, fallback decoding")

    raw = await request.body()
    for enc in ("utf-8", "latin-1"):
        try:
            decoded = raw.decode(enc, errors="replace")
            return json.loads(decoded)
        except ValueError:
            continue

    logger.error("Failed to decode Telegram webhook payload after fallbacks")
    return None


async def handle_telegram_webhook(
    request: Request,
    processor: Optional[TelegramUpdateProcessor] = Depends(get_processor),
):
    """Receive a Telegram update and hand it to the update processor."""
    if not is_secret_valid(request.headers.get(SECRET_HEADER)):
        logger.warning("Rejected webhook call with bad secret token")
        return _respond(status.HTTP_401_UNAUTHORIZED, ok=False, error="Unauthorized")

    try:
        body = await parse_telegram_update(request)
        if not isinstance(body, dict):
            return _respond(status.HTTP_400_BAD_REQUEST, ok=False, error="Invalid telegram payload")

        update = TelegramUpdate(**body)
        logger.debug(f"Telegram update received: {update.update_id}")

        if processor is None:
            raise RuntimeError("Update processor is not initialised")
        await processor.handle_update(update)
        return _respond(status.HTTP_200_OK, ok=True)

    except Exception as e:
        logger.error(f"Telegram webhook error: {e}", exc_info=True)
        return _respond(status.HTTP_500_INTERNAL_SERVER_ERROR, ok=False, error=str(e))


router.add_api_route(
    settings.webhook_path,
    handle_telegram_webhook,
    methods=["POST"],
    response_model=TelegramWebhookResponse,
)
