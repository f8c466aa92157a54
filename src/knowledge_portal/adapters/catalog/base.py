"""Base interface for course catalog adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


class CatalogError(Exception):
    """Raised when the course catalog cannot be queried."""

    pass


def first_present(*values: Any) -> Any:
    """Return the first truthy value, or None."""
    for value in values:
        if value:
            return value
    return None


def extract_embed(payload: dict[str, Any]) -> tuple[str | None, str | None]:
    """Pull embed id/type out of a lesson payload.

    The catalog reports embeds as ``embed_id``/``embed_type``, as a nested
    ``embed`` object, or camel-cased, depending on the endpoint.
    """
    embed = payload.get("embed") or {}
    if not isinstance(embed, dict):
        embed = {}
    embed_id = first_present(payload.get("embed_id"), embed.get("id"), payload.get("embedId"))
    embed_type = first_present(
        payload.get("embed_type"), embed.get("type"), payload.get("embedType")
    )
    return embed_id, embed_type


def extract_thumbnail_url(payload: dict[str, Any]) -> str | None:
    thumbnail = payload.get("thumbnail")
    if isinstance(thumbnail, dict):
        return first_present(thumbnail.get("url"), thumbnail.get("optimized_url"))
    if isinstance(thumbnail, str):
        return thumbnail
    return None


@dataclass
class CatalogLesson:
    """A lesson as reported by the course catalog."""

    id: str
    title: str
    order: int | None = None
    lesson_type: str | None = None
    thumbnail_url: str | None = None
    video_asset: dict[str, Any] | None = None
    embed_id: str | None = None
    embed_type: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CatalogLesson":
        embed_id, embed_type = extract_embed(payload)
        video_asset = payload.get("video_asset")
        return cls(
            id=payload["id"],
            title=payload.get("title") or "",
            order=payload.get("order"),
            lesson_type=payload.get("lesson_type"),
            thumbnail_url=extract_thumbnail_url(payload),
            video_asset=dict(video_asset) if isinstance(video_asset, dict) else None,
            embed_id=embed_id,
            embed_type=embed_type,
            raw=payload,
        )


@dataclass
class CatalogChapter:
    """A chapter within a course."""

    id: str
    title: str
    order: int | None = None
    lessons: list[CatalogLesson] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CatalogChapter":
        return cls(
            id=payload["id"],
            title=payload.get("title") or "",
            order=payload.get("order"),
            lessons=[CatalogLesson.from_payload(item) for item in payload.get("lessons") or []],
        )


@dataclass
class CatalogCourse:
    """A course summary from the course listing."""

    id: str
    title: str
    description: str | None = None
    thumbnail_url: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CatalogCourse":
        return cls(
            id=payload["id"],
            title=payload.get("title") or "",
            description=payload.get("description"),
            thumbnail_url=extract_thumbnail_url(payload),
        )


@dataclass
class CatalogCourseDetail(CatalogCourse):
    """A course with its chapter/lesson tree."""

    chapters: list[CatalogChapter] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CatalogCourseDetail":
        return cls(
            id=payload["id"],
            title=payload.get("title") or "",
            description=payload.get("description"),
            thumbnail_url=extract_thumbnail_url(payload),
            chapters=[CatalogChapter.from_payload(item) for item in payload.get("chapters") or []],
        )

    def lesson_ids(self) -> set[str]:
        return {lesson.id for chapter in self.chapters for lesson in chapter.lessons}


@dataclass
class Experience:
    """A surface within a company's external presence, backed by an app."""

    id: str
    name: str | None = None
    app_name: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Experience":
        app = payload.get("app") or {}
        return cls(id=payload["id"], name=payload.get("name"), app_name=app.get("name"))


@dataclass
class Company:
    """Company (tenant) details from the catalog platform."""

    id: str
    title: str | None = None
    route: str | None = None  # URL slug

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Company":
        return cls(id=payload["id"], title=payload.get("title"), route=payload.get("route"))


class CatalogAdapter(ABC):
    """Abstract base class for course catalog adapters.

    Implementations:
    - StubCatalogAdapter: In-memory catalog for tests and local development
    - WhopCatalogAdapter: Whop REST API

    Lesson payloads are returned as reported by the platform; normalizing the
    video asset fields is the caller's job.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def list_courses(self, company_id: str) -> list[CatalogCourse]:
        """List the company's courses (without chapters)."""
        ...

    @abstractmethod
    async def retrieve_course(self, course_id: str) -> CatalogCourseDetail:
        """Retrieve one course with its chapters and lessons."""
        ...

    @abstractmethod
    async def list_lessons(self, chapter_id: str) -> list[CatalogLesson]:
        """List the lessons of a chapter."""
        ...

    @abstractmethod
    async def retrieve_lesson(self, lesson_id: str) -> CatalogLesson:
        """Retrieve one lesson including its video asset metadata."""
        ...

    @abstractmethod
    async def list_experiences(self, company_id: str) -> list[Experience]:
        """List the company's experiences."""
        ...

    @abstractmethod
    async def retrieve_company(self, company_id: str) -> Company:
        """Retrieve company details (route/slug)."""
        ...

    async def health_check(self) -> bool:
        """Check if the catalog is reachable."""
        return True
