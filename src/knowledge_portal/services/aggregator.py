"""Merge the live course catalog with stored training status.

The merged view is built on every read and never persisted. Catalog failures
degrade the view instead of failing it: a course whose detail cannot be
retrieved is skipped, and a failed course listing yields an empty view with
a ``catalog_error`` message.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

from knowledge_portal.adapters.catalog import (
    CatalogAdapter,
    CatalogCourseDetail,
    CatalogError,
    CatalogLesson,
)
from knowledge_portal.domain import (
    CatalogUnavailableError,
    LessonType,
    NotFoundError,
    TrainingStatus,
    TrainingStatusRecord,
)
from knowledge_portal.logging import get_logger
from knowledge_portal.services.lesson_links import (
    LinkContext,
    build_lesson_url,
    resolve_link_context,
)
from knowledge_portal.services.training_store import TrainingStatusStore
from knowledge_portal.services.video_source import normalize_video_source

logger = get_logger(__name__)

MUX_THUMBNAIL_URL = "https://image.mux.com/{playback_id}/thumbnail.webp"


@dataclass
class TrainingStats:
    """Per-status rollup over video lessons."""

    total: int = 0
    pending: int = 0
    transcribing: int = 0
    transcribe_failed: int = 0
    transcribed: int = 0
    training: int = 0
    train_failed: int = 0
    trained: int = 0

    def add(self, status: TrainingStatus) -> None:
        self.total += 1
        setattr(self, status.value, getattr(self, status.value) + 1)

    def merge(self, other: "TrainingStats") -> None:
        for name in self.__dataclass_fields__:
            setattr(self, name, getattr(self, name) + getattr(other, name))

    def to_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


@dataclass
class MergedLesson:
    """A catalog lesson with its training record, if any."""

    lesson: CatalogLesson
    record: TrainingStatusRecord | None = None
    lesson_url: str | None = None

    @property
    def status(self) -> TrainingStatus:
        """Effective status; lessons without a record count as pending."""
        return self.record.status if self.record else TrainingStatus.PENDING

    @property
    def is_video(self) -> bool:
        return self.lesson.lesson_type == LessonType.MULTI

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.lesson.id,
            "title": self.lesson.title,
            "order": self.lesson.order,
            "lesson_type": self.lesson.lesson_type,
            "thumbnail_url": self.lesson.thumbnail_url,
            "lesson_url": self.lesson_url,
            "training_status": self.record.to_dict() if self.record else None,
        }


@dataclass
class MergedChapter:
    id: str
    title: str
    order: int | None = None
    lessons: list[MergedLesson] = field(default_factory=list)
    stats: TrainingStats = field(default_factory=TrainingStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "lessons": [lesson.to_dict() for lesson in self.lessons],
            "training_stats": self.stats.to_dict(),
        }


@dataclass
class MergedCourse:
    id: str
    title: str
    description: str | None = None
    thumbnail_url: str | None = None
    chapters: list[MergedChapter] = field(default_factory=list)
    stats: TrainingStats = field(default_factory=TrainingStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "thumbnail_url": self.thumbnail_url,
            "chapters": [chapter.to_dict() for chapter in self.chapters],
            "training_stats": self.stats.to_dict(),
        }


@dataclass
class MergedView:
    """Courses with training status, plus trained lessons missing from the catalog."""

    courses: list[MergedCourse] = field(default_factory=list)
    orphaned_lessons: list[TrainingStatusRecord] = field(default_factory=list)
    company_slug: str | None = None
    experience_id: str | None = None
    catalog_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "courses": [course.to_dict() for course in self.courses],
            "orphaned_lessons": [record.to_dict() for record in self.orphaned_lessons],
            "company_slug": self.company_slug,
            "experience_id": self.experience_id,
            "catalog_error": self.catalog_error,
        }


@dataclass
class LessonView:
    """A chapter lesson with normalized video fields, for the training UI."""

    id: str
    title: str
    order: int | None = None
    lesson_type: str | None = None
    thumbnail_url: str | None = None
    video_asset: dict[str, Any] | None = None
    embed_id: str | None = None
    embed_type: str | None = None
    video_source_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "lesson_type": self.lesson_type,
            "thumbnail_url": self.thumbnail_url,
            "video_asset": self.video_asset,
            "embed_id": self.embed_id,
            "embed_type": self.embed_type,
            "video_source_type": self.video_source_type,
        }


def cached_link_context(records: list[TrainingStatusRecord]) -> LinkContext:
    """Slug and experience id last cached on stored records."""
    company_slug = next((r.company_slug for r in records if r.company_slug), None)
    experience_id = next((r.experience_id for r in records if r.experience_id), None)
    return LinkContext(company_slug=company_slug, experience_id=experience_id)


class CourseAggregator:
    """Read-side view over the catalog and the training status store."""

    def __init__(self, catalog: CatalogAdapter, store: TrainingStatusStore) -> None:
        self.catalog = catalog
        self.store = store

    async def _retrieve_details(self, company_id: str, course_ids: list[str]) -> list[CatalogCourseDetail]:
        results = await asyncio.gather(
            *(self.catalog.retrieve_course(course_id) for course_id in course_ids),
            return_exceptions=True,
        )

        details = []
        for course_id, result in zip(course_ids, results, strict=True):
            if isinstance(result, CatalogError):
                logger.warning(
                    "course_detail_failed",
                    company_id=company_id,
                    course_id=course_id,
                    error=str(result),
                )
                continue
            if isinstance(result, BaseException):
                raise result
            details.append(result)
        return details

    async def merge_view(self, company_id: str) -> MergedView:
        """Build the merged course view for a company.

        Args:
            company_id: Tenant whose catalog and records are merged

        Returns:
            MergedView. Rollups count only video (``multi``) lessons. Orphans
            are trained records whose lesson id appears in none of the
            retrieved courses.
        """
        records = self.store.list_by_company(company_id)
        cached = cached_link_context(records)
        link = (await resolve_link_context(self.catalog, company_id)).or_fallback(
            cached.company_slug, cached.experience_id
        )

        try:
            courses = await self.catalog.list_courses(company_id)
        except CatalogError as e:
            logger.error("course_listing_failed", company_id=company_id, error=str(e))
            return MergedView(
                company_slug=link.company_slug,
                experience_id=link.experience_id,
                catalog_error=f"Failed to load courses: {e}",
            )

        if not courses:
            # Every course removed upstream; all trained records become orphans
            logger.warning("course_listing_empty", company_id=company_id)

        details = await self._retrieve_details(company_id, [course.id for course in courses])
        by_lesson = {record.lesson_id: record for record in records}

        catalog_lesson_ids: set[str] = set()
        merged_courses = []
        for detail in details:
            catalog_lesson_ids |= detail.lesson_ids()
            merged_courses.append(self._merge_course(detail, by_lesson, link))

        orphaned = [
            record
            for record in records
            if record.is_trained and record.lesson_id not in catalog_lesson_ids
        ]

        logger.info(
            "merged_view_built",
            company_id=company_id,
            courses=len(merged_courses),
            records=len(records),
            orphaned=len(orphaned),
        )
        return MergedView(
            courses=merged_courses,
            orphaned_lessons=orphaned,
            company_slug=link.company_slug,
            experience_id=link.experience_id,
        )

    def _merge_course(
        self,
        detail: CatalogCourseDetail,
        by_lesson: dict[str, TrainingStatusRecord],
        link: LinkContext,
    ) -> MergedCourse:
        course = MergedCourse(
            id=detail.id,
            title=detail.title,
            description=detail.description,
            thumbnail_url=detail.thumbnail_url,
        )

        for catalog_chapter in detail.chapters:
            chapter = MergedChapter(
                id=catalog_chapter.id,
                title=catalog_chapter.title,
                order=catalog_chapter.order,
            )
            for catalog_lesson in catalog_chapter.lessons:
                record = by_lesson.get(catalog_lesson.id)
                lesson_url = (record.lesson_url if record else None) or build_lesson_url(
                    link.company_slug, link.experience_id, detail.id, catalog_lesson.id
                )
                lesson = MergedLesson(lesson=catalog_lesson, record=record, lesson_url=lesson_url)
                chapter.lessons.append(lesson)
                if lesson.is_video:
                    chapter.stats.add(lesson.status)

            course.stats.merge(chapter.stats)
            course.chapters.append(chapter)

        return course

    async def _check_chapter_scope(self, company_id: str, course_id: str, chapter_id: str) -> None:
        try:
            courses = await self.catalog.list_courses(company_id)
            if course_id not in {course.id for course in courses}:
                raise NotFoundError("Course not found", company_id=company_id, course_id=course_id)
            course = await self.catalog.retrieve_course(course_id)
        except CatalogError as e:
            logger.error(
                "chapter_scope_check_failed",
                company_id=company_id,
                course_id=course_id,
                chapter_id=chapter_id,
                error=str(e),
            )
            raise CatalogUnavailableError(
                "Failed to load course", course_id=course_id, chapter_id=chapter_id
            ) from e

        if chapter_id not in {chapter.id for chapter in course.chapters}:
            raise NotFoundError("Chapter not found", course_id=course_id, chapter_id=chapter_id)

    async def list_chapter_lessons(
        self, company_id: str, course_id: str, chapter_id: str
    ) -> list[LessonView]:
        """List a chapter's lessons with video details resolved.

        The course must be one of the company's courses and the chapter part
        of that course.

        Raises:
            NotFoundError: If the course or chapter is outside the company
            CatalogUnavailableError: If the course or the chapter's lessons
                cannot be loaded
        """
        await self._check_chapter_scope(company_id, course_id, chapter_id)

        try:
            lessons = await self.catalog.list_lessons(chapter_id)
        except CatalogError as e:
            logger.error("chapter_lessons_failed", chapter_id=chapter_id, error=str(e))
            raise CatalogUnavailableError(
                "Failed to load chapter lessons", chapter_id=chapter_id
            ) from e

        return list(await asyncio.gather(*(self._lesson_view(lesson) for lesson in lessons)))

    async def _lesson_view(self, listed: CatalogLesson) -> LessonView:
        try:
            lesson = await self.catalog.retrieve_lesson(listed.id)
        except CatalogError as e:
            logger.warning("lesson_detail_failed", lesson_id=listed.id, error=str(e))
            return LessonView(
                id=listed.id,
                title=listed.title,
                order=listed.order,
                lesson_type=listed.lesson_type,
                thumbnail_url=listed.thumbnail_url,
                embed_id=listed.embed_id,
                embed_type=listed.embed_type,
            )

        video = normalize_video_source(
            video_asset=lesson.video_asset,
            embed_id=lesson.embed_id or listed.embed_id,
            embed_type=lesson.embed_type or listed.embed_type,
            lesson=lesson.raw,
        )

        video_asset = None
        if lesson.video_asset:
            video_asset = dict(lesson.video_asset)
            if video.signed_playback_token:
                video_asset["signed_video_playback_token"] = video.signed_playback_token

        thumbnail_url = lesson.thumbnail_url or listed.thumbnail_url
        if lesson.video_asset and video.playback_id:
            thumbnail_url = MUX_THUMBNAIL_URL.format(playback_id=video.playback_id)

        return LessonView(
            id=lesson.id,
            title=lesson.title or listed.title,
            order=lesson.order if lesson.order is not None else listed.order,
            lesson_type=lesson.lesson_type or listed.lesson_type,
            thumbnail_url=thumbnail_url,
            video_asset=video_asset,
            embed_id=video.embed_id,
            embed_type=video.embed_type,
            video_source_type=str(video.video_source_type) if video.video_source_type else None,
        )
