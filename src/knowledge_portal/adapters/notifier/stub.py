"""Stub notifier for testing."""

from typing import Any

from knowledge_portal.adapters.notifier.base import TrainingNotifier
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)


class StubNotifier(TrainingNotifier):
    """Collects sent payloads; ``succeed=False`` simulates an unreachable webhook."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: list[tuple[str, dict[str, Any]]] = []

    @property
    def name(self) -> str:
        return "stub"

    async def notify(self, url: str, payload: dict[str, Any]) -> bool:
        self.sent.append((url, payload))
        logger.info("stub_notify", url=url, action=payload.get("action"), succeed=self.succeed)
        return self.succeed
