"""Tests for the training status store."""

from datetime import UTC, datetime

import pytest

from knowledge_portal.domain import NotFoundError, TrainingStatus, TrainingStatusRecord


def _record(**overrides) -> TrainingStatusRecord:
    values = {
        "company_id": "biz_acme",
        "course_id": "cors_1",
        "lesson_id": "les_1",
        "title": "Welcome",
        "status": TrainingStatus.PENDING,
        "video_source_type": "mux",
        "playback_id": "pb_1",
    }
    values.update(overrides)
    return TrainingStatusRecord(**values)


def test_upsert_inserts(store) -> None:
    stored = store.upsert(_record(metadata={"tags": ["intro"]}))

    assert stored.id is not None
    assert stored.status == TrainingStatus.PENDING
    assert stored.metadata == {"tags": ["intro"]}
    assert stored.created_at is not None


def test_upsert_keeps_one_record_per_lesson(store) -> None:
    """Test a second upsert for the same key updates in place."""
    first = store.upsert(_record())
    second = store.upsert(_record(status=TrainingStatus.TRANSCRIBING, title="Welcome v2"))

    assert second.id == first.id
    assert second.status == TrainingStatus.TRANSCRIBING
    assert second.title == "Welcome v2"
    assert len(store.list_by_company("biz_acme")) == 1


def test_same_lesson_in_two_companies(store) -> None:
    store.upsert(_record())
    store.upsert(_record(company_id="biz_other"))

    assert len(store.list_by_company("biz_acme")) == 1
    assert len(store.list_by_company("biz_other")) == 1


def test_upsert_preserves_artifacts(store) -> None:
    """Test status writes never clear artifacts owned by other writers."""
    store.upsert(_record(status=TrainingStatus.TRAINING))
    store.update_fields(
        "biz_acme",
        "les_1",
        transcription_file="https://cdn.test/transcriptions/biz_acme/les_1.vtt",
        lesson_summary_pdf="https://cdn.test/transcriptions/biz_acme/les_1-summary.pdf",
    )

    stored = store.upsert(
        _record(status=TrainingStatus.TRAINED, trained_at=datetime.now(UTC))
    )

    assert stored.transcription_file == "https://cdn.test/transcriptions/biz_acme/les_1.vtt"
    assert stored.lesson_summary_pdf == "https://cdn.test/transcriptions/biz_acme/les_1-summary.pdf"
    assert stored.trained_at is not None


def test_get_missing_returns_none(store) -> None:
    assert store.get("biz_acme", "missing") is None

    with pytest.raises(NotFoundError):
        store.get_or_raise("biz_acme", "missing")


def test_delete(store) -> None:
    store.upsert(_record())

    store.delete("biz_acme", "les_1")

    assert store.get("biz_acme", "les_1") is None
    with pytest.raises(NotFoundError):
        store.delete("biz_acme", "les_1")


def test_update_fields(store) -> None:
    store.upsert(_record())

    updated = store.update_fields("biz_acme", "les_1", metadata={"category": "basics"})

    assert updated.metadata == {"category": "basics"}
    assert updated.updated_at is not None


@pytest.mark.parametrize(
    "field,value",
    [("lesson_id", "les_2"), ("company_id", "biz_other"), ("created_at", None)],
)
def test_update_fields_rejects_key_columns(store, field, value) -> None:
    """Test the key and creation columns cannot be rewritten."""
    store.upsert(_record())

    with pytest.raises(ValueError, match=field):
        store.update_fields("biz_acme", "les_1", **{field: value})

    assert store.get("biz_acme", "les_1") is not None
    assert store.get("biz_acme", "les_2") is None


def test_update_fields_missing_record(store) -> None:
    with pytest.raises(NotFoundError):
        store.update_fields("biz_acme", "missing", metadata={})
