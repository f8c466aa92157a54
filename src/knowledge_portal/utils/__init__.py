"""Shared utilities."""

from knowledge_portal.utils.async_utils import run_async

__all__ = ["run_async"]
