"""Lesson training lifecycle operations.

Status submissions come from the training UI and the transcription/training
pipeline. The other operations act on trained lessons: editing metadata,
untraining (artifact cleanup, record removal), generating a summary PDF and
keeping a lesson that has disappeared from the catalog.

All validation and precondition checks run before any write. Downstream
webhooks are notified only after the database change is committed, and a
failed notification never fails the operation.
"""

import re
from datetime import UTC, datetime
from typing import Any
from urllib.parse import unquote

from knowledge_portal.adapters.catalog import CatalogAdapter
from knowledge_portal.adapters.notifier import TrainingNotifier
from knowledge_portal.adapters.storage import BlobStorageAdapter
from knowledge_portal.adapters.summary import SummaryGenerator
from knowledge_portal.config import Settings, get_settings
from knowledge_portal.domain import (
    ConflictError,
    InvalidStateError,
    NotifyError,
    StorageError,
    TrainingStatus,
    TrainingStatusRecord,
    ValidationError,
    VideoProcessingError,
    VideoSourceType,
    WebhookAction,
    can_transition,
)
from knowledge_portal.logging import get_logger
from knowledge_portal.services.lesson_links import build_lesson_url, resolve_link_context
from knowledge_portal.services.training_store import TrainingStatusStore
from knowledge_portal.services.video_source import NormalizedVideo, normalize_video_source

logger = get_logger(__name__)

# Object path inside the artifacts bucket, from a public or signed storage URL
ARTIFACT_PATH = re.compile(r"/transcriptions/([^?#]+)")

WEBHOOK_FIELDS = (
    "id",
    "whop_company_id",
    "course_id",
    "chapter_id",
    "lesson_id",
    "video_id",
    "playback_id",
    "title",
    "status",
    "metadata",
    "company_slug",
    "experience_id",
    "lesson_url",
    "trained_at",
)


def artifact_path(url: str | None, fallback: str) -> str | None:
    """Storage object path for an artifact URL.

    Returns None when there is no artifact, and ``fallback`` when the URL does
    not point into the artifacts bucket.
    """
    if not url:
        return None
    match = ARTIFACT_PATH.search(url)
    if match:
        return unquote(match.group(1))
    return fallback


def webhook_payload(record: TrainingStatusRecord, action: WebhookAction) -> dict[str, Any]:
    data = record.to_dict()
    payload: dict[str, Any] = {"action": str(action)}
    payload.update({key: data[key] for key in WEBHOOK_FIELDS})
    if action == WebhookAction.UPDATE:
        payload["updated_at"] = data["updated_at"]
    return payload


def _require_trained(record: TrainingStatusRecord, operation: str) -> None:
    if not record.is_trained:
        raise InvalidStateError(
            f"Only trained lessons can be {operation}",
            lesson_id=record.lesson_id,
            status=str(record.status),
        )


class LessonLifecycleService:
    """Coordinates the store, the catalog and the downstream adapters."""

    def __init__(
        self,
        store: TrainingStatusStore,
        catalog: CatalogAdapter,
        storage: BlobStorageAdapter,
        notifier: TrainingNotifier,
        summary: SummaryGenerator,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.storage = storage
        self.notifier = notifier
        self.summary = summary
        self.settings = settings or get_settings()

    async def submit_status(
        self,
        company_id: str | None,
        course_id: str | None,
        lesson_id: str | None,
        title: str | None,
        status: str | None,
        chapter_id: str | None = None,
        video_id: str | None = None,
        playback_id: str | None = None,
        signed_video_playback_token: str | None = None,
        video_source_type: str | None = None,
        video_asset: dict[str, Any] | None = None,
        embed_id: str | None = None,
        embed_type: str | None = None,
        error_message: str | None = None,
        metadata: Any = None,
    ) -> TrainingStatusRecord:
        """Create or update a lesson's training status.

        Raises:
            ValidationError: Missing fields, unknown status, bad metadata or
                an incomplete video source
            VideoProcessingError: The hosted video has no playback id yet
                because it is still processing upstream
            InvalidStateError: The existing record may not move to ``status``
        """
        required = {
            "company_id": company_id,
            "lesson_id": lesson_id,
            "course_id": course_id,
            "title": title,
            "status": status,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing=missing)

        target = TrainingStatus.parse(status)
        if target is None:
            allowed = [s.value for s in TrainingStatus]
            raise ValidationError(
                f"Invalid status. Must be one of: {', '.join(allowed)}",
                status=status,
            )

        if metadata is not None and not isinstance(metadata, dict):
            raise ValidationError("metadata must be a JSON object")

        try:
            video = normalize_video_source(
                video_asset=video_asset,
                embed_id=embed_id,
                embed_type=embed_type,
                explicit_source_type=video_source_type,
                video_id=video_id,
                playback_id=playback_id,
                signed_token=signed_video_playback_token,
            )
        except ValueError as e:
            raise ValidationError(
                f"Invalid video_source_type: {video_source_type}",
                video_source_type=video_source_type,
            ) from e

        self._validate_video(video, target)

        existing = self.store.get(company_id, lesson_id)
        if existing and not can_transition(existing.status, target):
            raise InvalidStateError(
                f"Cannot change status from {existing.status} to {target}",
                current_status=str(existing.status),
                requested_status=str(target),
            )

        link = await resolve_link_context(self.catalog, company_id)
        if existing:
            link = link.or_fallback(existing.company_slug, existing.experience_id)

        trained_at = None
        if target == TrainingStatus.TRAINED:
            if existing and existing.is_trained and existing.trained_at:
                trained_at = existing.trained_at
            else:
                trained_at = datetime.now(UTC)

        record = TrainingStatusRecord(
            company_id=company_id,
            course_id=course_id,
            chapter_id=chapter_id or None,
            lesson_id=lesson_id,
            title=title,
            status=target,
            video_id=video.video_id,
            playback_id=video.playback_id,
            signed_video_playback_token=video.signed_playback_token,
            video_source_type=str(video.video_source_type) if video.video_source_type else None,
            embed_id=video.embed_id,
            embed_type=video.embed_type,
            error_message=error_message or None,
            metadata=metadata or {},
            company_slug=link.company_slug,
            experience_id=link.experience_id,
            lesson_url=build_lesson_url(
                link.company_slug,
                link.experience_id,
                course_id,
                lesson_id,
                base_url=self.settings.lesson_url_base,
            ),
            trained_at=trained_at,
        )

        logger.info(
            "training_status_submitted",
            company_id=company_id,
            lesson_id=lesson_id,
            status=str(target),
            previous_status=str(existing.status) if existing else None,
            video_source_type=record.video_source_type,
            playback_id=video.playback_id,
            has_signed_token=bool(video.signed_playback_token),
        )
        return self.store.upsert(record)

    def _validate_video(self, video: NormalizedVideo, status: TrainingStatus) -> None:
        if video.video_source_type is None and status == TrainingStatus.PENDING:
            raise ValidationError(
                "Missing video_source_type. Unable to determine video source type. "
                "Please ensure the lesson has a video (uploaded, YouTube, or Loom)."
            )

        if video.video_source_type != VideoSourceType.MUX:
            return

        if not video.playback_id:
            if video.is_processing:
                raise VideoProcessingError(video.asset_status)
            raise ValidationError(
                "Missing playback_id. The video_asset must contain a playback_id field. "
                "The video may still be processing."
            )

        if not video.signed_playback_token:
            raise ValidationError(
                "Missing signed_video_playback_token. The video_asset must contain a "
                "signed_video_playback_token field for video authentication."
            )

    async def edit_metadata(
        self,
        company_id: str,
        course_id: str | None,
        lesson_id: str,
        metadata: Any,
    ) -> TrainingStatusRecord:
        """Replace a trained lesson's metadata and notify the knowledge base sync."""
        if not isinstance(metadata, dict):
            raise ValidationError("metadata must be a JSON object")

        record = self.store.get_or_raise(company_id, lesson_id)
        _require_trained(record, "edited")

        updated = self.store.update_fields(company_id, lesson_id, metadata=metadata)
        logger.info(
            "lesson_metadata_updated",
            company_id=company_id,
            course_id=course_id or record.course_id,
            lesson_id=lesson_id,
        )

        await self._dispatch_webhook(
            self.settings.training_update_webhook_url, updated, WebhookAction.UPDATE
        )
        return updated

    async def untrain(
        self,
        company_id: str,
        course_id: str | None,
        lesson_id: str,
        chapter_id: str | None = None,
    ) -> TrainingStatusRecord:
        """Remove a trained lesson's artifacts and record.

        Storage cleanup runs first. If it fails the record is left in place
        so the operation can be retried.

        Returns:
            The record as it was before deletion

        Raises:
            NotFoundError: No record for the lesson
            InvalidStateError: The lesson is not trained
            StorageError: Artifact removal failed; carries the attempted paths
        """
        record = self.store.get_or_raise(company_id, lesson_id)
        _require_trained(record, "untrained")

        paths = [
            path
            for path in (
                artifact_path(record.transcription_file, f"{company_id}/{lesson_id}.vtt"),
                artifact_path(record.lesson_summary_pdf, f"{company_id}/{lesson_id}-summary.pdf"),
            )
            if path
        ]

        if paths:
            bucket = self.settings.storage_bucket
            result = await self.storage.remove_objects(bucket, paths)
            if not result.success:
                logger.error(
                    "artifact_removal_failed",
                    company_id=company_id,
                    lesson_id=lesson_id,
                    bucket=bucket,
                    paths=paths,
                    error=result.error,
                )
                raise StorageError(
                    "Failed to delete files from storage",
                    files_attempted=paths,
                    details=result.error,
                )
            logger.info(
                "artifacts_removed",
                company_id=company_id,
                lesson_id=lesson_id,
                requested=paths,
                deleted=result.deleted,
            )

        self.store.delete(company_id, lesson_id)
        logger.info(
            "lesson_untrained",
            company_id=company_id,
            course_id=course_id or record.course_id,
            chapter_id=chapter_id or record.chapter_id,
            lesson_id=lesson_id,
        )

        await self._dispatch_webhook(
            self.settings.training_delete_webhook_url, record, WebhookAction.DELETE
        )
        return record

    async def generate_summary(self, company_id: str, lesson_id: str) -> TrainingStatusRecord:
        """Generate the lesson summary PDF and store its URL on the record.

        Raises:
            NotFoundError: No record for the lesson
            InvalidStateError: The lesson is not trained
            ConflictError: A summary already exists
            NotifyError: The generator failed; carries the upstream status when known
        """
        record = self.store.get_or_raise(company_id, lesson_id)
        _require_trained(record, "summarized")
        if record.lesson_summary_pdf:
            raise ConflictError(
                "Summary PDF already exists for this lesson",
                lesson_summary_pdf=record.lesson_summary_pdf,
            )

        result = await self.summary.generate(lesson_id, company_id)
        if not result.success or not result.artifact_url:
            logger.error(
                "summary_generation_failed",
                company_id=company_id,
                lesson_id=lesson_id,
                status_code=result.status_code,
                error=result.error_message,
            )
            raise NotifyError(
                "Failed to generate summary PDF",
                status_code=result.status_code,
                details=result.error_message or "Summary generator returned no artifact",
            )

        updated = self.store.update_fields(
            company_id, lesson_id, lesson_summary_pdf=result.artifact_url
        )
        logger.info(
            "summary_generated",
            company_id=company_id,
            lesson_id=lesson_id,
            artifact_url=result.artifact_url,
        )
        return updated

    async def keep_orphaned(self, company_id: str, lesson_id: str) -> TrainingStatusRecord:
        """Mark a lesson that left the catalog as intentionally kept."""
        record = self.store.get_or_raise(company_id, lesson_id)

        metadata = dict(record.metadata)
        metadata["is_orphaned_kept"] = True
        metadata["orphaned_kept_at"] = datetime.now(UTC).isoformat()

        updated = self.store.update_fields(company_id, lesson_id, metadata=metadata)
        logger.info("orphaned_lesson_kept", company_id=company_id, lesson_id=lesson_id)
        return updated

    async def _dispatch_webhook(
        self,
        url: str | None,
        record: TrainingStatusRecord,
        action: WebhookAction,
    ) -> None:
        """Notify the downstream automation. Failures are logged only."""
        if not url:
            logger.warning("webhook_not_configured", action=str(action), lesson_id=record.lesson_id)
            return

        try:
            delivered = await self.notifier.notify(url, webhook_payload(record, action))
        except Exception as e:
            logger.error(
                "webhook_dispatch_error",
                action=str(action),
                lesson_id=record.lesson_id,
                error=str(e),
            )
            return

        if delivered:
            logger.info("webhook_dispatched", action=str(action), lesson_id=record.lesson_id)
        else:
            logger.warning("webhook_not_acknowledged", action=str(action), lesson_id=record.lesson_id)
