"""Base interface for blob storage adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class RemoveResult:
    """Result of removing objects from a bucket."""

    deleted: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class BlobStorageAdapter(ABC):
    """Abstract base class for blob storage.

    Implementations:
    - StubBlobStorage: In-memory buckets for testing
    - SupabaseBlobStorage: Supabase Storage REST API
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def remove_objects(self, bucket: str, paths: list[str]) -> RemoveResult:
        """Delete objects by path.

        Missing objects are not an error. Failures are reported through
        ``RemoveResult.error`` rather than raised.
        """
        ...

    async def health_check(self) -> bool:
        """Check if storage is reachable."""
        return True
