"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID as PyUUID
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func, true

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# =============================================================================
# Tenants and access
# =============================================================================


class ClientModel(Base):
    """Portal client (community) ORM model."""

    __tablename__ = "clients"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    whop_company_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    company_slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, server_default=true(), default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )


class UserRoleModel(Base):
    """Role assignment for an authenticated user."""

    __tablename__ = "user_roles"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)  # admin, client
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


# =============================================================================
# Lesson training pipeline
# =============================================================================


class LessonTrainingModel(Base):
    """Training status of one catalog lesson for one company."""

    __tablename__ = "lesson_trainings"
    __table_args__ = (
        UniqueConstraint("whop_company_id", "lesson_id", name="uq_lesson_training_company_lesson"),
    )

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    whop_company_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    course_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    chapter_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    lesson_id: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    video_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    playback_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    signed_video_playback_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    video_source_type: Mapped[str | None] = mapped_column(String(20), nullable=True)  # mux, youtube, loom
    embed_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    embed_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[str] = mapped_column(String(50), server_default="pending", index=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    metadata_: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONType, nullable=True)
    # Cached from the catalog so deep links survive catalog outages
    company_slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    experience_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    lesson_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Artifacts written by the transcription / summary services
    transcription_file: Mapped[str | None] = mapped_column(Text, nullable=True)
    lesson_summary_pdf: Mapped[str | None] = mapped_column(Text, nullable=True)
    trained_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )
