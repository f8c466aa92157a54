"""Supabase Storage adapter."""

import httpx

from knowledge_portal.adapters.storage.base import BlobStorageAdapter, RemoveResult
from knowledge_portal.config import settings
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)


class SupabaseBlobStorage(BlobStorageAdapter):
    """Blob storage backed by the Supabase Storage REST API.

    Deletes require the service role key; the anon key is subject to bucket
    policies and silently deletes nothing.
    """

    def __init__(
        self,
        supabase_url: str | None = None,
        service_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.supabase_url = (supabase_url or settings.supabase_url or "").rstrip("/")
        self.service_key = service_key or settings.supabase_service_role_key
        self.timeout = timeout if timeout is not None else settings.storage_timeout
        self.transport = transport

        if not self.supabase_url or not self.service_key:
            logger.warning("Supabase storage not configured")

    @property
    def name(self) -> str:
        return "supabase"

    async def remove_objects(self, bucket: str, paths: list[str]) -> RemoveResult:
        if not paths:
            return RemoveResult()
        if not self.supabase_url or not self.service_key:
            return RemoveResult(error="Supabase storage not configured")

        headers = {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                # DELETE with a body; httpx only allows that through request()
                response = await client.request(
                    "DELETE",
                    f"{self.supabase_url}/storage/v1/object/{bucket}",
                    headers=headers,
                    json={"prefixes": paths},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            error = f"Storage API error: {e.response.status_code} - {e.response.text[:300]}"
            logger.error("storage_remove_failed", bucket=bucket, paths=paths, error=error)
            return RemoveResult(error=error)
        except httpx.HTTPError as e:
            logger.error("storage_remove_failed", bucket=bucket, paths=paths, error=str(e))
            return RemoveResult(error=str(e) or type(e).__name__)

        deleted = [item.get("name") for item in data if isinstance(item, dict) and item.get("name")]
        logger.info(
            "storage_objects_removed",
            bucket=bucket,
            requested=len(paths),
            deleted=len(deleted),
        )
        return RemoveResult(deleted=deleted)

    async def health_check(self) -> bool:
        return bool(self.supabase_url and self.service_key)
