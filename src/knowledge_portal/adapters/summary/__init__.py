"""Lesson summary PDF generators."""

from knowledge_portal.adapters.summary.base import SummaryGenerator, SummaryResult
from knowledge_portal.adapters.summary.stub import StubSummaryGenerator
from knowledge_portal.adapters.summary.supabase import SupabaseSummaryGenerator

__all__ = [
    "StubSummaryGenerator",
    "SummaryGenerator",
    "SummaryResult",
    "SupabaseSummaryGenerator",
]
