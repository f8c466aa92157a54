"""Persistence for lesson training status records.

One row per (company, lesson). Writes go through a native
``INSERT ... ON CONFLICT DO UPDATE`` keyed on that pair, so concurrent
submissions for the same lesson resolve as last-write-wins.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from knowledge_portal.db.models import LessonTrainingModel
from knowledge_portal.domain import NotFoundError, TrainingStatus, TrainingStatusRecord
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)

CONFLICT_KEY = ("whop_company_id", "lesson_id")

# Owned by the transcription and summary writers, or set once on insert
PRESERVED_ON_CONFLICT = frozenset(
    {"id", "whop_company_id", "lesson_id", "transcription_file", "lesson_summary_pdf", "created_at"}
)

# Record attribute -> mapped attribute, where they differ
FIELD_ALIASES = {"company_id": "whop_company_id", "metadata": "metadata_"}


def record_from_model(model: LessonTrainingModel) -> TrainingStatusRecord:
    return TrainingStatusRecord(
        id=model.id,
        company_id=model.whop_company_id,
        course_id=model.course_id,
        chapter_id=model.chapter_id,
        lesson_id=model.lesson_id,
        title=model.title,
        status=TrainingStatus(model.status),
        video_id=model.video_id,
        playback_id=model.playback_id,
        signed_video_playback_token=model.signed_video_playback_token,
        video_source_type=model.video_source_type,
        embed_id=model.embed_id,
        embed_type=model.embed_type,
        error_message=model.error_message,
        metadata=dict(model.metadata_ or {}),
        company_slug=model.company_slug,
        experience_id=model.experience_id,
        lesson_url=model.lesson_url,
        transcription_file=model.transcription_file,
        lesson_summary_pdf=model.lesson_summary_pdf,
        trained_at=model.trained_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class TrainingStatusStore:
    """Training status records for one database session.

    Every mutation commits its own transaction. On a database error the
    transaction is rolled back and the error propagates.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _column(self, attribute: str) -> Any:
        return LessonTrainingModel.__mapper__.columns[FIELD_ALIASES.get(attribute, attribute)]

    def _insert(self):
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(LessonTrainingModel.__table__)
        if dialect == "sqlite":
            return sqlite_insert(LessonTrainingModel.__table__)
        raise NotImplementedError(f"Upsert not supported for dialect: {dialect}")

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def upsert(self, record: TrainingStatusRecord) -> TrainingStatusRecord:
        """Insert or update the record for (company_id, lesson_id).

        On conflict every column is overwritten except the artifact columns,
        the key and the creation timestamp.

        Returns:
            The stored record as re-read from the database.
        """
        now = datetime.now(UTC)
        values: dict[str, Any] = {
            "company_id": record.company_id,
            "course_id": record.course_id,
            "chapter_id": record.chapter_id,
            "lesson_id": record.lesson_id,
            "title": record.title,
            "status": str(record.status),
            "video_id": record.video_id,
            "playback_id": record.playback_id,
            "signed_video_playback_token": record.signed_video_playback_token,
            "video_source_type": record.video_source_type,
            "embed_id": record.embed_id,
            "embed_type": record.embed_type,
            "error_message": record.error_message,
            "metadata": record.metadata or {},
            "company_slug": record.company_slug,
            "experience_id": record.experience_id,
            "lesson_url": record.lesson_url,
            "trained_at": record.trained_at,
            "updated_at": now,
        }
        row = {self._column(key): value for key, value in values.items()}
        update = {
            column: value for column, value in row.items() if column.name not in PRESERVED_ON_CONFLICT
        }

        stmt = self._insert().values(row)
        stmt = stmt.on_conflict_do_update(index_elements=list(CONFLICT_KEY), set_=update)

        try:
            self.session.execute(stmt)
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self._commit()

        logger.info(
            "training_status_upserted",
            company_id=record.company_id,
            lesson_id=record.lesson_id,
            status=str(record.status),
        )
        return self.get_or_raise(record.company_id, record.lesson_id)

    def _get_model(self, company_id: str, lesson_id: str) -> LessonTrainingModel | None:
        return self.session.execute(
            select(LessonTrainingModel).where(
                LessonTrainingModel.whop_company_id == company_id,
                LessonTrainingModel.lesson_id == lesson_id,
            )
        ).scalar_one_or_none()

    def get(self, company_id: str, lesson_id: str) -> TrainingStatusRecord | None:
        model = self._get_model(company_id, lesson_id)
        if model is None:
            return None
        # Upserts bypass the identity map
        self.session.refresh(model)
        return record_from_model(model)

    def get_or_raise(self, company_id: str, lesson_id: str) -> TrainingStatusRecord:
        record = self.get(company_id, lesson_id)
        if record is None:
            raise NotFoundError(
                "Lesson training record not found",
                company_id=company_id,
                lesson_id=lesson_id,
            )
        return record

    def list_by_company(self, company_id: str) -> list[TrainingStatusRecord]:
        models = (
            self.session.execute(
                select(LessonTrainingModel)
                .where(LessonTrainingModel.whop_company_id == company_id)
                .order_by(LessonTrainingModel.created_at)
            )
            .scalars()
            .all()
        )
        return [record_from_model(model) for model in models]

    def delete(self, company_id: str, lesson_id: str) -> None:
        model = self._get_model(company_id, lesson_id)
        if model is None:
            raise NotFoundError(
                "Lesson training record not found",
                company_id=company_id,
                lesson_id=lesson_id,
            )
        self.session.delete(model)
        self._commit()
        logger.info("training_record_deleted", company_id=company_id, lesson_id=lesson_id)

    def update_fields(
        self, company_id: str, lesson_id: str, /, **fields: Any
    ) -> TrainingStatusRecord:
        """Set individual fields on an existing record and stamp ``updated_at``.

        Field names are record attribute names (``metadata``, ``lesson_summary_pdf``...).
        """
        model = self._get_model(company_id, lesson_id)
        if model is None:
            raise NotFoundError(
                "Lesson training record not found",
                company_id=company_id,
                lesson_id=lesson_id,
            )

        locked = PRESERVED_ON_CONFLICT - {"transcription_file", "lesson_summary_pdf"}
        rejected = sorted(key for key in fields if FIELD_ALIASES.get(key, key) in locked)
        if rejected:
            raise ValueError(f"Field cannot be updated: {', '.join(rejected)}")

        for key, value in fields.items():
            attribute = FIELD_ALIASES.get(key, key)
            if isinstance(value, TrainingStatus):
                value = str(value)
            setattr(model, attribute, value)
        model.updated_at = datetime.now(UTC)

        self._commit()
        self.session.refresh(model)
        logger.info(
            "training_record_updated",
            company_id=company_id,
            lesson_id=lesson_id,
            fields=sorted(fields),
        )
        return record_from_model(model)
