"""Domain models - pure Python classes independent of database."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from knowledge_portal.domain.enums import TrainingStatus, UserRole


@dataclass
class TrainingStatusRecord:
    """Training state of one lesson for one tenant (company)."""

    company_id: str
    course_id: str
    lesson_id: str
    title: str
    status: TrainingStatus
    chapter_id: str | None = None
    video_id: str | None = None
    playback_id: str | None = None
    signed_video_playback_token: str | None = None
    video_source_type: str | None = None
    embed_id: str | None = None
    embed_type: str | None = None
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    company_slug: str | None = None
    experience_id: str | None = None
    lesson_url: str | None = None
    transcription_file: str | None = None
    lesson_summary_pdf: str | None = None
    trained_at: datetime | None = None
    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_trained(self) -> bool:
        return self.status == TrainingStatus.TRAINED

    @property
    def is_orphaned_kept(self) -> bool:
        """Whether an operator chose to keep this lesson after it left the catalog."""
        return bool(self.metadata.get("is_orphaned_kept"))

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable representation using the persisted column names."""
        data = asdict(self)
        data["whop_company_id"] = data.pop("company_id")
        data["status"] = str(self.status)
        data["id"] = str(self.id) if self.id else None
        for key in ("trained_at", "created_at", "updated_at"):
            value = data[key]
            data[key] = value.isoformat() if value else None
        return data


@dataclass(frozen=True)
class RequestContext:
    """Who is calling and which tenant the call is scoped to.

    Resolved once per request and passed explicitly to every operation.
    """

    user_id: str
    role: UserRole
    company_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
