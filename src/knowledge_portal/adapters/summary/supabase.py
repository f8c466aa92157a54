"""Supabase edge function summary generator."""

import httpx

from knowledge_portal.adapters.summary.base import SummaryGenerator, SummaryResult
from knowledge_portal.config import settings
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)


class SupabaseSummaryGenerator(SummaryGenerator):
    """Calls the ``generate-lesson-summary`` edge function and waits for the PDF URL."""

    def __init__(
        self,
        supabase_url: str | None = None,
        anon_key: str | None = None,
        function_name: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.supabase_url = (supabase_url or settings.supabase_url or "").rstrip("/")
        self.anon_key = anon_key or settings.supabase_anon_key
        self.function_name = function_name or settings.summary_function_name
        self.timeout = timeout if timeout is not None else settings.summary_timeout
        self.transport = transport

    @property
    def name(self) -> str:
        return "supabase"

    async def generate(self, lesson_id: str, company_id: str) -> SummaryResult:
        if not self.supabase_url or not self.anon_key:
            return SummaryResult(
                success=False,
                error_message="Supabase configuration missing",
                status_code=500,
            )

        url = f"{self.supabase_url}/functions/v1/{self.function_name}"
        logger.info("summary_generation_started", lesson_id=lesson_id, company_id=company_id)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    url,
                    headers={
                        "Authorization": f"Bearer {self.anon_key}",
                        "Content-Type": "application/json",
                    },
                    json={"lesson_id": lesson_id, "company_id": company_id},
                )
        except httpx.HTTPError as e:
            logger.error("summary_generation_unreachable", lesson_id=lesson_id, error=str(e))
            return SummaryResult(
                success=False,
                error_message=f"Summary service unreachable: {e}",
            )

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            error = data.get("error") if isinstance(data, dict) else None
            logger.error(
                "summary_generation_failed",
                lesson_id=lesson_id,
                status_code=response.status_code,
                error=error,
            )
            return SummaryResult(
                success=False,
                error_message=error or "Failed to generate summary",
                status_code=response.status_code,
            )

        artifact_url = data.get("lesson_summary_pdf") if isinstance(data, dict) else None
        if not artifact_url:
            return SummaryResult(
                success=False,
                error_message="Summary service returned no lesson_summary_pdf",
            )

        logger.info("summary_generation_completed", lesson_id=lesson_id)
        return SummaryResult(success=True, artifact_url=artifact_url)
