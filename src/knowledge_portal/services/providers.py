"""Adapter selection from settings."""

from knowledge_portal.adapters.auth import AuthAdapter, StubAuthAdapter, SupabaseAuthAdapter
from knowledge_portal.adapters.catalog import (
    CatalogAdapter,
    StubCatalogAdapter,
    WhopCatalogAdapter,
)
from knowledge_portal.adapters.notifier import StubNotifier, TrainingNotifier, WebhookNotifier
from knowledge_portal.adapters.storage import (
    BlobStorageAdapter,
    StubBlobStorage,
    SupabaseBlobStorage,
)
from knowledge_portal.adapters.summary import (
    StubSummaryGenerator,
    SummaryGenerator,
    SupabaseSummaryGenerator,
)
from knowledge_portal.config import settings
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)


def get_catalog_adapter() -> CatalogAdapter:
    """Get the configured course catalog."""
    provider = settings.catalog_provider.lower()

    if provider == "whop":
        return WhopCatalogAdapter()
    if provider != "stub":
        logger.warning("unknown_provider", kind="catalog", provider=provider)
    return StubCatalogAdapter()


def get_storage_adapter() -> BlobStorageAdapter:
    """Get the configured blob storage."""
    provider = settings.storage_provider.lower()

    if provider == "supabase":
        return SupabaseBlobStorage()
    if provider != "stub":
        logger.warning("unknown_provider", kind="storage", provider=provider)
    return StubBlobStorage()


def get_notifier() -> TrainingNotifier:
    """Get the configured downstream notifier."""
    provider = settings.notifier_provider.lower()

    if provider == "webhook":
        return WebhookNotifier()
    if provider != "stub":
        logger.warning("unknown_provider", kind="notifier", provider=provider)
    return StubNotifier()


def get_summary_generator() -> SummaryGenerator:
    """Get the configured summary PDF generator."""
    provider = settings.summary_provider.lower()

    if provider == "supabase":
        return SupabaseSummaryGenerator()
    if provider != "stub":
        logger.warning("unknown_provider", kind="summary", provider=provider)
    return StubSummaryGenerator()


def get_auth_adapter() -> AuthAdapter:
    """Get the configured identity provider."""
    provider = settings.auth_provider.lower()

    if provider == "supabase":
        return SupabaseAuthAdapter()
    if provider != "stub":
        logger.warning("unknown_provider", kind="auth", provider=provider)
    return StubAuthAdapter()
