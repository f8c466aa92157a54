"""Course knowledge base endpoints.

Request bodies accept snake_case keys and the camelCase keys sent by the
legacy dashboard (``companyId``, ``lessonId``...).
"""

from typing import Any

from fastapi import APIRouter
from pydantic import AliasChoices, BaseModel, Field

from knowledge_portal.api.deps import AggregatorDep, ContextDep, LifecycleDep, resolve_company_id
from knowledge_portal.logging import get_logger

router = APIRouter(prefix="/knowledge", tags=["Knowledge"])
logger = get_logger(__name__)


def _field(snake: str, camel: str | None = None, **kwargs: Any) -> Any:
    aliases = (snake, camel) if camel else (snake,)
    return Field(default=None, validation_alias=AliasChoices(*aliases), **kwargs)


class CompanyRequest(BaseModel):
    """Request body naming the target company."""

    company_id: str | None = _field("company_id", "companyId")


class StatusRequest(CompanyRequest):
    """Training status submission."""

    course_id: str | None = _field("course_id", "courseId")
    chapter_id: str | None = _field("chapter_id", "chapterId")
    lesson_id: str | None = _field("lesson_id", "lessonId")
    title: str | None = _field("title")
    status: str | None = _field("status")
    video_id: str | None = _field("video_id", "videoId")
    playback_id: str | None = _field("playback_id", "playbackId")
    signed_video_playback_token: str | None = _field(
        "signed_video_playback_token", "signedVideoPlaybackToken"
    )
    video_source_type: str | None = _field("video_source_type", "videoSourceType")
    video_asset: dict[str, Any] | None = _field("video_asset", "videoAsset")
    embed_id: str | None = _field("embed_id", "embedId")
    embed_type: str | None = _field("embed_type", "embedType")
    error_message: str | None = _field("error_message", "errorMessage")
    metadata: Any = _field("metadata", description="JSON object")


class MetadataUpdateRequest(CompanyRequest):
    course_id: str | None = _field("course_id", "courseId")
    metadata: Any = _field("metadata", description="JSON object replacing the current metadata")


class UntrainRequest(CompanyRequest):
    course_id: str | None = _field("course_id", "courseId")
    chapter_id: str | None = _field("chapter_id", "chapterId")


class RecordResponse(BaseModel):
    """A training record after a successful operation."""

    success: bool = True
    data: dict[str, Any]


class UntrainResponse(BaseModel):
    success: bool = True
    message: str


class SummaryResponse(RecordResponse):
    lesson_summary_pdf: str | None = None


@router.get(
    "/courses",
    summary="List courses with training status",
    description="Merge the company's catalog courses with stored training status and orphans.",
)
async def list_courses(
    context: ContextDep,
    aggregator: AggregatorDep,
    company_id: str | None = None,
) -> dict[str, Any]:
    company = resolve_company_id(context, company_id)
    view = await aggregator.merge_view(company)
    return view.to_dict()


@router.get(
    "/courses/{course_id}/chapters/{chapter_id}/lessons",
    summary="List chapter lessons",
    description=(
        "Lessons of a chapter with video asset, embed and thumbnail resolved. "
        "The course must belong to the caller's company."
    ),
)
async def list_chapter_lessons(
    course_id: str,
    chapter_id: str,
    context: ContextDep,
    aggregator: AggregatorDep,
    company_id: str | None = None,
) -> dict[str, Any]:
    company = resolve_company_id(context, company_id)
    logger.info(
        "chapter_lessons_requested",
        company_id=company,
        course_id=course_id,
        chapter_id=chapter_id,
    )
    lessons = await aggregator.list_chapter_lessons(company, course_id, chapter_id)
    return {"lessons": [lesson.to_dict() for lesson in lessons]}


@router.post(
    "/courses/status",
    response_model=RecordResponse,
    summary="Submit training status",
)
async def submit_status(
    request: StatusRequest,
    context: ContextDep,
    lifecycle: LifecycleDep,
) -> RecordResponse:
    company_id = resolve_company_id(context, request.company_id)
    record = await lifecycle.submit_status(
        company_id=company_id,
        course_id=request.course_id,
        lesson_id=request.lesson_id,
        title=request.title,
        status=request.status,
        chapter_id=request.chapter_id,
        video_id=request.video_id,
        playback_id=request.playback_id,
        signed_video_playback_token=request.signed_video_playback_token,
        video_source_type=request.video_source_type,
        video_asset=request.video_asset,
        embed_id=request.embed_id,
        embed_type=request.embed_type,
        error_message=request.error_message,
        metadata=request.metadata,
    )
    return RecordResponse(data=record.to_dict())


@router.post(
    "/courses/lessons/{lesson_id}/update",
    response_model=RecordResponse,
    summary="Edit trained lesson metadata",
)
async def update_lesson(
    lesson_id: str,
    request: MetadataUpdateRequest,
    context: ContextDep,
    lifecycle: LifecycleDep,
) -> RecordResponse:
    company_id = resolve_company_id(context, request.company_id)
    record = await lifecycle.edit_metadata(
        company_id, request.course_id, lesson_id, request.metadata
    )
    return RecordResponse(data=record.to_dict())


@router.post(
    "/courses/lessons/{lesson_id}/untrain",
    response_model=UntrainResponse,
    summary="Untrain a lesson",
    description="Delete the lesson's artifacts from storage and remove its training record.",
)
async def untrain_lesson(
    lesson_id: str,
    request: UntrainRequest,
    context: ContextDep,
    lifecycle: LifecycleDep,
) -> UntrainResponse:
    company_id = resolve_company_id(context, request.company_id)
    await lifecycle.untrain(company_id, request.course_id, lesson_id, request.chapter_id)
    return UntrainResponse(message="Lesson untrained and deleted successfully")


@router.post(
    "/courses/lessons/{lesson_id}/generate-summary",
    response_model=SummaryResponse,
    summary="Generate lesson summary PDF",
)
async def generate_summary(
    lesson_id: str,
    request: CompanyRequest,
    context: ContextDep,
    lifecycle: LifecycleDep,
) -> SummaryResponse:
    company_id = resolve_company_id(context, request.company_id)
    record = await lifecycle.generate_summary(company_id, lesson_id)
    return SummaryResponse(data=record.to_dict(), lesson_summary_pdf=record.lesson_summary_pdf)


@router.post(
    "/courses/lessons/{lesson_id}/keep-orphaned",
    response_model=RecordResponse,
    summary="Keep an orphaned lesson",
    description="Mark a trained lesson that is no longer in the catalog as intentionally kept.",
)
async def keep_orphaned(
    lesson_id: str,
    request: CompanyRequest,
    context: ContextDep,
    lifecycle: LifecycleDep,
) -> RecordResponse:
    company_id = resolve_company_id(context, request.company_id)
    record = await lifecycle.keep_orphaned(company_id, lesson_id)
    return RecordResponse(data=record.to_dict())
