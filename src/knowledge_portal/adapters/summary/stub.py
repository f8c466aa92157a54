"""Stub summary generator for testing."""

from knowledge_portal.adapters.summary.base import SummaryGenerator, SummaryResult
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)


class StubSummaryGenerator(SummaryGenerator):
    """Returns a deterministic artifact URL, or a failure when ``error`` is set."""

    def __init__(
        self,
        base_url: str = "https://storage.example.com/storage/v1/object/public/transcriptions",
        error: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.base_url = base_url
        self.error = error
        self.status_code = status_code
        self.calls: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "stub"

    async def generate(self, lesson_id: str, company_id: str) -> SummaryResult:
        self.calls.append((lesson_id, company_id))
        logger.info("stub_generate_summary", lesson_id=lesson_id, company_id=company_id)

        if self.error:
            return SummaryResult(
                success=False,
                error_message=self.error,
                status_code=self.status_code,
            )

        return SummaryResult(
            success=True,
            artifact_url=f"{self.base_url}/{company_id}/{lesson_id}-summary.pdf",
        )
