"""Stub course catalog adapter for testing."""

from knowledge_portal.adapters.catalog.base import (
    CatalogAdapter,
    CatalogCourse,
    CatalogCourseDetail,
    CatalogError,
    CatalogLesson,
    Company,
    Experience,
)
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)


class StubCatalogAdapter(CatalogAdapter):
    """In-memory catalog.

    Courses are keyed by company. ``failing`` names methods that should raise
    CatalogError, to simulate platform outages.
    """

    def __init__(
        self,
        courses: dict[str, list[CatalogCourseDetail]] | None = None,
        companies: dict[str, Company] | None = None,
        experiences: dict[str, list[Experience]] | None = None,
        lesson_details: dict[str, CatalogLesson] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.courses = courses or {}
        self.companies = companies or {}
        self.experiences = experiences or {}
        self.lesson_details = lesson_details or {}
        self.failing = failing or set()

    @property
    def name(self) -> str:
        return "stub"

    def _maybe_fail(self, method: str) -> None:
        if method in self.failing:
            raise CatalogError(f"stub catalog failure in {method}")

    def _all_courses(self) -> list[CatalogCourseDetail]:
        return [course for courses in self.courses.values() for course in courses]

    async def list_courses(self, company_id: str) -> list[CatalogCourse]:
        self._maybe_fail("list_courses")
        logger.debug("stub_list_courses", company_id=company_id)
        return [
            CatalogCourse(
                id=course.id,
                title=course.title,
                description=course.description,
                thumbnail_url=course.thumbnail_url,
            )
            for course in self.courses.get(company_id, [])
        ]

    async def retrieve_course(self, course_id: str) -> CatalogCourseDetail:
        self._maybe_fail("retrieve_course")
        for course in self._all_courses():
            if course.id == course_id:
                return course
        raise CatalogError(f"Course {course_id} not found")

    async def list_lessons(self, chapter_id: str) -> list[CatalogLesson]:
        self._maybe_fail("list_lessons")
        for course in self._all_courses():
            for chapter in course.chapters:
                if chapter.id == chapter_id:
                    return list(chapter.lessons)
        raise CatalogError(f"Chapter {chapter_id} not found")

    async def retrieve_lesson(self, lesson_id: str) -> CatalogLesson:
        self._maybe_fail("retrieve_lesson")
        if lesson_id in self.lesson_details:
            return self.lesson_details[lesson_id]
        for course in self._all_courses():
            for chapter in course.chapters:
                for lesson in chapter.lessons:
                    if lesson.id == lesson_id:
                        return lesson
        raise CatalogError(f"Lesson {lesson_id} not found")

    async def list_experiences(self, company_id: str) -> list[Experience]:
        self._maybe_fail("list_experiences")
        return list(self.experiences.get(company_id, []))

    async def retrieve_company(self, company_id: str) -> Company:
        self._maybe_fail("retrieve_company")
        if company_id not in self.companies:
            raise CatalogError(f"Company {company_id} not found")
        return self.companies[company_id]
