#!/usr/bin/env python3
"""Register (or inspect) the bot webhook with Telegram.

Usage:
    python ops/set_webhook.py https://bot.example.com
    python ops/set_webhook.py --info
"""
import sys

import requests

from proxy_bot.config import settings

ALLOWED_UPDATES = ["message"]


def api_url(method: str) -> str:
    return f"{settings.telegram_api_base.rstrip('/')}/bot{settings.telegram_bot_token}/{method}"


def set_webhook(public_base_url: str) -> dict:
    data = {
        "url": f"{public_base_url.rstrip('/')}{settings.webhook_path}",
        "allowed_updates": ALLOWED_UPDATES,
        "drop_pending_updates": True,
    }
    if settings.telegram_secret_token:
        data["secret_token"] = settings.telegram_secret_token
    resp = requests.post(api_url("setWebhook"), json=data, timeout=30)
    return resp.json()


def webhook_info() -> dict:
    resp = requests.get(api_url("getWebhookInfo"), timeout=30)
    return resp.json()


if __name__ == "__main__":
    if not settings.telegram_bot_token:
        print("TELEGRAM_BOT_TOKEN is not set")
        sys.exit(1)

    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    if sys.argv[1] == "--info":
        info = webhook_info().get("result", {})
        print(f"URL: {info.get('url')}")
        print(f"Pending updates: {info.get('pending_update_count')}")
        print(f"Last error: {info.get('last_error_message', '-')}")
    else:
        result = set_webhook(sys.argv[1])
        print(f"ok={result.get('ok')} {result.get('description', '')}")
