"""Blob storage adapters."""

from knowledge_portal.adapters.storage.base import BlobStorageAdapter, RemoveResult
from knowledge_portal.adapters.storage.stub import StubBlobStorage
from knowledge_portal.adapters.storage.supabase import SupabaseBlobStorage

__all__ = [
    "BlobStorageAdapter",
    "RemoveResult",
    "StubBlobStorage",
    "SupabaseBlobStorage",
]
