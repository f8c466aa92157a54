"""Stub blob storage for testing."""

from knowledge_portal.adapters.storage.base import BlobStorageAdapter, RemoveResult
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)


class StubBlobStorage(BlobStorageAdapter):
    """In-memory buckets of object paths.

    Set ``fail_with`` to make every removal report that error.
    """

    def __init__(
        self,
        objects: dict[str, set[str]] | None = None,
        fail_with: str | None = None,
    ) -> None:
        self.objects = objects or {}
        self.fail_with = fail_with
        self.remove_calls: list[tuple[str, list[str]]] = []

    @property
    def name(self) -> str:
        return "stub"

    def put(self, bucket: str, path: str) -> None:
        self.objects.setdefault(bucket, set()).add(path)

    async def remove_objects(self, bucket: str, paths: list[str]) -> RemoveResult:
        self.remove_calls.append((bucket, list(paths)))

        if self.fail_with:
            logger.info("stub_storage_remove_failed", bucket=bucket, paths=paths)
            return RemoveResult(error=self.fail_with)

        stored = self.objects.setdefault(bucket, set())
        deleted = [path for path in paths if path in stored]
        stored.difference_update(deleted)
        return RemoveResult(deleted=deleted)
