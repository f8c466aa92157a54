"""Supabase Auth identity provider."""

import httpx

from knowledge_portal.adapters.auth.base import AuthAdapter, AuthUser
from knowledge_portal.config import settings
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)


class SupabaseAuthAdapter(AuthAdapter):
    """Verifies session tokens against ``/auth/v1/user``."""

    def __init__(
        self,
        supabase_url: str | None = None,
        anon_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.supabase_url = (supabase_url or settings.supabase_url or "").rstrip("/")
        self.anon_key = anon_key or settings.supabase_anon_key
        self.timeout = timeout if timeout is not None else settings.auth_timeout
        self.transport = transport

        if not self.supabase_url or not self.anon_key:
            logger.warning("Supabase auth not configured")

    @property
    def name(self) -> str:
        return "supabase"

    async def get_user(self, access_token: str) -> AuthUser | None:
        if not self.supabase_url or not self.anon_key:
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    f"{self.supabase_url}/auth/v1/user",
                    headers={
                        "apikey": self.anon_key,
                        "Authorization": f"Bearer {access_token}",
                    },
                )
        except httpx.HTTPError as e:
            logger.error("auth_request_failed", error=str(e))
            return None

        if response.status_code != 200:
            logger.warning("auth_token_rejected", status_code=response.status_code)
            return None

        data = response.json()
        return AuthUser(
            id=data["id"],
            email=data.get("email"),
            user_metadata=data.get("user_metadata") or {},
        )
