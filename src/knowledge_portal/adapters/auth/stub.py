"""Stub identity provider."""

from knowledge_portal.adapters.auth.base import AuthAdapter, AuthUser


class StubAuthAdapter(AuthAdapter):
    """Looks tokens up in a static table."""

    def __init__(self, users: dict[str, AuthUser] | None = None) -> None:
        self.users = users or {}

    @property
    def name(self) -> str:
        return "stub"

    async def get_user(self, access_token: str) -> AuthUser | None:
        return self.users.get(access_token)
