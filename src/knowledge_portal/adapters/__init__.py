"""Adapters for external services."""

from knowledge_portal.adapters.auth.base import AuthAdapter
from knowledge_portal.adapters.catalog.base import CatalogAdapter
from knowledge_portal.adapters.notifier.base import TrainingNotifier
from knowledge_portal.adapters.storage.base import BlobStorageAdapter
from knowledge_portal.adapters.summary.base import SummaryGenerator

__all__ = [
    "AuthAdapter",
    "BlobStorageAdapter",
    "CatalogAdapter",
    "SummaryGenerator",
    "TrainingNotifier",
]
