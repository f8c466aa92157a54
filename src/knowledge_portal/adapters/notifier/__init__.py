"""Downstream automation notifiers."""

from knowledge_portal.adapters.notifier.base import TrainingNotifier
from knowledge_portal.adapters.notifier.stub import StubNotifier
from knowledge_portal.adapters.notifier.webhook import WebhookNotifier

__all__ = ["StubNotifier", "TrainingNotifier", "WebhookNotifier"]
