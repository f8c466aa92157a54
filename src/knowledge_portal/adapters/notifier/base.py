"""Base interface for downstream automation notifiers."""

from abc import ABC, abstractmethod
from typing import Any


class TrainingNotifier(ABC):
    """Notifies the downstream automation (knowledge base sync) of record changes.

    Implementations:
    - StubNotifier: Records payloads for testing
    - WebhookNotifier: HTTP POST to a webhook URL

    ``notify`` must never raise: callers treat notification as fire-and-forget.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def notify(self, url: str, payload: dict[str, Any]) -> bool:
        """Send the payload.

        Returns:
            True if the receiver acknowledged with a 2xx response
        """
        ...
