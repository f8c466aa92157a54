"""Base interface for identity providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class AuthUser:
    """An authenticated user as reported by the identity provider."""

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)


class AuthAdapter(ABC):
    """Resolves a bearer token to a user.

    Implementations:
    - StubAuthAdapter: Static token table for tests and local development
    - SupabaseAuthAdapter: Supabase Auth
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def get_user(self, access_token: str) -> AuthUser | None:
        """Return the token's user, or None if the token is invalid."""
        ...
