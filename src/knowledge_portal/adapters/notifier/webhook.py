"""HTTP webhook notifier."""

from typing import Any

import httpx

from knowledge_portal.adapters.notifier.base import TrainingNotifier
from knowledge_portal.config import settings
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)


class WebhookNotifier(TrainingNotifier):
    """POSTs JSON payloads with a short timeout and no retry."""

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.webhook_timeout
        self.transport = transport

    @property
    def name(self) -> str:
        return "webhook"

    async def notify(self, url: str, payload: dict[str, Any]) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error(
                "webhook_call_failed",
                url=url,
                action=payload.get("action"),
                error=str(e) or type(e).__name__,
            )
            return False

        if response.is_success:
            logger.info("webhook_called", url=url, action=payload.get("action"))
            return True

        logger.warning(
            "webhook_rejected",
            url=url,
            action=payload.get("action"),
            status_code=response.status_code,
        )
        return False
