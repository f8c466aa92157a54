"""Tests for domain models."""

from datetime import UTC, datetime
from uuid import UUID

import pytest

from knowledge_portal.domain import (
    ConflictError,
    NotifyError,
    PortalError,
    RequestContext,
    StorageError,
    TrainingStatus,
    TrainingStatusRecord,
    UserRole,
    VideoProcessingError,
    can_transition,
)


def test_record_defaults() -> None:
    """Test creating a TrainingStatusRecord."""
    record = TrainingStatusRecord(
        company_id="biz_acme",
        course_id="cors_1",
        lesson_id="les_1",
        title="Welcome",
        status=TrainingStatus.PENDING,
    )

    assert record.metadata == {}
    assert record.is_trained is False
    assert record.is_orphaned_kept is False
    assert record.trained_at is None


def test_record_to_dict_uses_column_names() -> None:
    trained_at = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
    record = TrainingStatusRecord(
        company_id="biz_acme",
        course_id="cors_1",
        lesson_id="les_1",
        title="Welcome",
        status=TrainingStatus.TRAINED,
        metadata={"is_orphaned_kept": True},
        trained_at=trained_at,
        id=UUID("12345678-1234-5678-1234-567812345678"),
    )

    data = record.to_dict()

    assert data["whop_company_id"] == "biz_acme"
    assert "company_id" not in data
    assert data["status"] == "trained"
    assert data["id"] == "12345678-1234-5678-1234-567812345678"
    assert data["trained_at"] == "2026-03-01T12:00:00+00:00"
    assert data["created_at"] is None
    assert record.is_trained is True
    assert record.is_orphaned_kept is True


def test_status_parse() -> None:
    assert TrainingStatus.parse("transcribe_failed") == TrainingStatus.TRANSCRIBE_FAILED
    assert TrainingStatus.parse("TRAINED") is None
    assert TrainingStatus.parse(None) is None


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (TrainingStatus.PENDING, TrainingStatus.TRANSCRIBING, True),
        (TrainingStatus.TRANSCRIBING, TrainingStatus.TRANSCRIBE_FAILED, True),
        (TrainingStatus.TRANSCRIBE_FAILED, TrainingStatus.PENDING, True),
        (TrainingStatus.TRANSCRIBED, TrainingStatus.TRAINING, True),
        (TrainingStatus.TRAINING, TrainingStatus.TRAINED, True),
        (TrainingStatus.TRAIN_FAILED, TrainingStatus.TRAINING, True),
        (TrainingStatus.TRAINED, TrainingStatus.TRAINED, True),
        (TrainingStatus.PENDING, TrainingStatus.TRAINED, False),
        (TrainingStatus.TRAINED, TrainingStatus.PENDING, False),
        (TrainingStatus.TRAINING, TrainingStatus.TRANSCRIBING, False),
    ],
)
def test_transitions(current, target, allowed) -> None:
    assert can_transition(current, target) is allowed


def test_error_to_dict_includes_details() -> None:
    error = ConflictError("Summary PDF already exists for this lesson", lesson_summary_pdf="https://x")

    assert error.status_code == 409
    assert error.to_dict() == {
        "error": "Summary PDF already exists for this lesson",
        "lesson_summary_pdf": "https://x",
    }
    assert isinstance(error, PortalError)


def test_storage_error_carries_paths() -> None:
    error = StorageError("Failed to delete files from storage", files_attempted=["a.vtt"])

    assert error.files_attempted == ["a.vtt"]
    assert error.to_dict()["files_attempted"] == ["a.vtt"]


def test_notify_error_status_override() -> None:
    assert NotifyError("failed").status_code == 502
    assert NotifyError("failed", status_code=404).status_code == 404


def test_video_processing_error() -> None:
    error = VideoProcessingError("preparing")

    assert error.video_status == "preparing"
    assert "preparing" in error.message


def test_request_context_roles() -> None:
    assert RequestContext(user_id="u1", role=UserRole.ADMIN).is_admin is True
    assert RequestContext(user_id="u2", role=UserRole.CLIENT, company_id="biz").is_admin is False
