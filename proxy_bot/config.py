from typing import Optional

from pydantic_settings import BaseSettings


class ConfigurationError(Exception):
    """Raised when a required setting is missing."""


class Settings(BaseSettings):
    telegram_bot_token: str = ""
    telegram_secret_token: Optional[str] = None
    telegram_api_base: str = "https://api.telegram.org"
    n8n_webhook_url: str = ""
    redis_url: Optional[str] = None
    state_ttl_seconds: int = 60 * 60 * 24 * 2
    webhook_path: str = "/webhook"
    http_timeout_seconds: float = 30.0
    log_level: str = "INFO"
    debug: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
