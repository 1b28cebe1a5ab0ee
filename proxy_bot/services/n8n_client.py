from dataclasses import dataclass
from typing import Optional

import httpx

from proxy_bot.config import ConfigurationError
from proxy_bot.logging_config import get_logger
from proxy_bot.schemas.submission import SubmissionPayload

logger = get_logger("n8n_client")


@dataclass
class DispatchResult:
    ok: bool
    status_code: int
    body_text: Optional[str] = None


class N8nClient:
    """Posts video submissions to the n8n webhook."""

    def __init__(self, webhook_url: str, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        if not webhook_url:
            raise ConfigurationError("N8N_WEBHOOK_URL is required")
        self.webhook_url = webhook_url
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def send_video(self, payload: SubmissionPayload) -> DispatchResult:
        response = await self._client.post(self.webhook_url, json=payload.to_wire())
        try:
            body_text = response.text
        except Exception as e:
            logger.warning(f"Could not read n8n response body: {e}")
            body_text = None
        return DispatchResult(ok=response.is_success, status_code=response.status_code, body_text=body_text)
