import httpx
from fastapi import FastAPI

from proxy_bot.config import settings
from proxy_bot.logging_config import get_logger, setup_logging
from proxy_bot.routers import telegram_webhook
from proxy_bot.services.bot_identity import BotIdentityCache
from proxy_bot.services.n8n_client import N8nClient
from proxy_bot.services.state_store import ChatStateStore, build_redis_client
from proxy_bot.services.telegram_service import TelegramService
from proxy_bot.services.update_processor import TelegramUpdateProcessor

setup_logging(settings.log_level)

logger = get_logger("main")

APP_NAME = "tg-n8n-proxy-bot"

app = FastAPI(
    title="Telegram to n8n proxy bot",
    description="Collects video metadata from Telegram and forwards it to an n8n workflow",
    version="0.1.0",
    debug=settings.debug,
)

app.include_router(telegram_webhook.router)


def build_processor() -> TelegramUpdateProcessor:
    """Wire the update processor with clients built from settings."""
    timeout = httpx.Timeout(settings.http_timeout_seconds)
    telegram = TelegramService(
        settings.telegram_bot_token,
        api_base=settings.telegram_api_base,
        client=httpx.AsyncClient(timeout=timeout),
    )
    n8n = N8nClient(settings.n8n_webhook_url, client=httpx.AsyncClient(timeout=timeout))
    store = ChatStateStore(build_redis_client(settings.redis_url), ttl_seconds=settings.state_ttl_seconds)
    return TelegramUpdateProcessor(store, telegram, n8n, BotIdentityCache(telegram))


@app.on_event("startup")
async def start_processor() -> None:
    app.state.processor = build_processor()
    logger.info(
        "Update processor ready",
        extra={
            "context": {
                "webhook_path": settings.webhook_path,
                "redis": bool(settings.redis_url),
                "secret_token": bool(settings.telegram_secret_token),
            }
        },
    )


@app.on_event("shutdown")
async def stop_processor() -> None:
    processor = getattr(app.state, "processor", None)
    if processor is None:
        return
    await processor.telegram.close()
    await processor.n8n.close()
    await processor.store.close()
    app.state.processor = None


@app.get("/health")
async def health():
    return {"ok": True, "name": APP_NAME}
