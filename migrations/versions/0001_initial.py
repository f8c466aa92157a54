"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Portal clients (one per community)
    op.create_table(
        "clients",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=True),
        sa.Column("whop_company_id", sa.String(255), nullable=True),
        sa.Column("company_slug", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_clients_user_id", "clients", ["user_id"])
    op.create_index("ix_clients_whop_company_id", "clients", ["whop_company_id"])

    # Role assignments
    op.create_table(
        "user_roles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", name="uq_user_roles_user_id"),
        sa.CheckConstraint("role IN ('admin', 'client')", name="ck_user_roles_role"),
    )

    # Lesson training status, one row per (company, lesson)
    op.create_table(
        "lesson_trainings",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("whop_company_id", sa.String(255), nullable=False),
        sa.Column("course_id", sa.String(255), nullable=False),
        sa.Column("chapter_id", sa.String(255), nullable=True),
        sa.Column("lesson_id", sa.String(255), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("video_id", sa.String(255), nullable=True),
        sa.Column("playback_id", sa.String(255), nullable=True),
        sa.Column("signed_video_playback_token", sa.Text(), nullable=True),
        sa.Column("video_source_type", sa.String(20), nullable=True),
        sa.Column("embed_id", sa.String(255), nullable=True),
        sa.Column("embed_type", sa.String(20), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column("company_slug", sa.String(255), nullable=True),
        sa.Column("experience_id", sa.String(255), nullable=True),
        sa.Column("lesson_url", sa.Text(), nullable=True),
        sa.Column("transcription_file", sa.Text(), nullable=True),
        sa.Column("lesson_summary_pdf", sa.Text(), nullable=True),
        sa.Column("trained_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "whop_company_id", "lesson_id", name="uq_lesson_training_company_lesson"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'transcribing', 'transcribe_failed', 'transcribed', "
            "'training', 'train_failed', 'trained')",
            name="ck_lesson_trainings_status",
        ),
        sa.CheckConstraint(
            "video_source_type IS NULL OR video_source_type IN ('mux', 'youtube', 'loom')",
            name="ck_lesson_trainings_video_source_type",
        ),
    )
    op.create_index("ix_lesson_trainings_whop_company_id", "lesson_trainings", ["whop_company_id"])
    op.create_index("ix_lesson_trainings_course_id", "lesson_trainings", ["course_id"])
    op.create_index("ix_lesson_trainings_status", "lesson_trainings", ["status"])


def downgrade() -> None:
    op.drop_index("ix_lesson_trainings_status", table_name="lesson_trainings")
    op.drop_index("ix_lesson_trainings_course_id", table_name="lesson_trainings")
    op.drop_index("ix_lesson_trainings_whop_company_id", table_name="lesson_trainings")
    op.drop_table("lesson_trainings")
    op.drop_table("user_roles")
    op.drop_index("ix_clients_whop_company_id", table_name="clients")
    op.drop_index("ix_clients_user_id", table_name="clients")
    op.drop_table("clients")
