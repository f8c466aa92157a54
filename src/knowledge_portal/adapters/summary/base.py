"""Base interface for lesson summary PDF generators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class SummaryResult:
    """Result of a summary generation request."""

    success: bool
    artifact_url: str | None = None
    error_message: str | None = None
    status_code: int | None = None  # Upstream HTTP status on failure


class SummaryGenerator(ABC):
    """Abstract base class for lesson summary PDF generators.

    Implementations:
    - StubSummaryGenerator: Returns a fake artifact URL
    - SupabaseSummaryGenerator: Supabase edge function

    The generator reads the lesson's transcript itself; callers only pass ids.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def generate(self, lesson_id: str, company_id: str) -> SummaryResult:
        """Render and store the summary PDF, returning its URL."""
        ...
