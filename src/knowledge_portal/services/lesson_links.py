"""Member-facing lesson deep links.

A lesson URL needs the company's route (slug) and the id of the experience
that hosts the Courses app:

    {lesson_url_base}/{slug}/lessons-{experience_id}/app/courses/{course_id}/lessons/{lesson_id}/
"""

from dataclasses import dataclass

from knowledge_portal.adapters.catalog import CatalogAdapter, CatalogError
from knowledge_portal.config import settings
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)

# App name of the experience that serves course lessons
COURSES_APP_NAME = "Courses"


@dataclass(frozen=True)
class LinkContext:
    """Company slug and courses experience id, either of which may be unknown."""

    company_slug: str | None = None
    experience_id: str | None = None

    @property
    def complete(self) -> bool:
        return bool(self.company_slug and self.experience_id)

    def or_fallback(self, company_slug: str | None, experience_id: str | None) -> "LinkContext":
        """Fill missing parts from previously cached values."""
        return LinkContext(
            company_slug=self.company_slug or company_slug,
            experience_id=self.experience_id or experience_id,
        )


def build_lesson_url(
    company_slug: str | None,
    experience_id: str | None,
    course_id: str | None,
    lesson_id: str | None,
    base_url: str | None = None,
) -> str | None:
    """Build a lesson deep link, or None if any part is missing."""
    if not (company_slug and experience_id and course_id and lesson_id):
        return None

    base = (base_url or settings.lesson_url_base).rstrip("/")
    return (
        f"{base}/{company_slug}/lessons-{experience_id}"
        f"/app/courses/{course_id}/lessons/{lesson_id}/"
    )


async def resolve_link_context(catalog: CatalogAdapter, company_id: str) -> LinkContext:
    """Look up the company slug and courses experience for deep links.

    Each lookup is best-effort: a catalog failure leaves that part unset.
    """
    company_slug = None
    experience_id = None

    try:
        company = await catalog.retrieve_company(company_id)
        company_slug = company.route
    except CatalogError as e:
        logger.warning("company_lookup_failed", company_id=company_id, error=str(e))

    try:
        experiences = await catalog.list_experiences(company_id)
        for experience in experiences:
            if experience.app_name == COURSES_APP_NAME:
                experience_id = experience.id
                break
    except CatalogError as e:
        logger.warning("experience_lookup_failed", company_id=company_id, error=str(e))

    return LinkContext(company_slug=company_slug, experience_id=experience_id)
