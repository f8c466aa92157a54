"""API route modules."""

from knowledge_portal.api.routes import health, knowledge

__all__ = ["health", "knowledge"]
