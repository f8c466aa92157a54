"""Identity providers."""

from knowledge_portal.adapters.auth.base import AuthAdapter, AuthUser
from knowledge_portal.adapters.auth.stub import StubAuthAdapter
from knowledge_portal.adapters.auth.supabase import SupabaseAuthAdapter

__all__ = ["AuthAdapter", "AuthUser", "StubAuthAdapter", "SupabaseAuthAdapter"]
