"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CATALOG_PROVIDER"] = "stub"
os.environ["STORAGE_PROVIDER"] = "stub"
os.environ["NOTIFIER_PROVIDER"] = "stub"
os.environ["SUMMARY_PROVIDER"] = "stub"
os.environ["AUTH_PROVIDER"] = "stub"
os.environ["TRAINING_UPDATE_WEBHOOK_URL"] = "https://hooks.example.com/update-training"
os.environ["TRAINING_DELETE_WEBHOOK_URL"] = "https://hooks.example.com/delete-training"

COMPANY_ID = "biz_acme"
STORAGE_BASE = "https://proj.supabase.co/storage/v1/object/public/transcriptions"


@pytest.fixture
def db_session() -> Generator[Any, None, None]:
    """A session on a fresh in-memory schema."""
    from knowledge_portal.db.models import Base
    from knowledge_portal.db.session import SessionLocal, engine

    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def store(db_session):
    """Training status store over the test session."""
    from knowledge_portal.services.training_store import TrainingStatusStore

    return TrainingStatusStore(db_session)


@pytest.fixture
def catalog():
    """Stub catalog with one course: a hosted video, a PDF and a YouTube lesson."""
    from knowledge_portal.adapters.catalog import (
        CatalogCourseDetail,
        Company,
        Experience,
        StubCatalogAdapter,
    )

    course = CatalogCourseDetail.from_payload(
        {
            "id": "cors_1",
            "title": "Onboarding",
            "chapters": [
                {
                    "id": "chap_1",
                    "title": "Getting Started",
                    "order": 1,
                    "lessons": [
                        {
                            "id": "les_video",
                            "title": "Welcome",
                            "order": 1,
                            "lesson_type": "multi",
                            "video_asset": {
                                "asset_id": "asset_1",
                                "playback_id": "pb_1",
                                "signed_video_playback_token": "tok_1234567890",
                                "status": "ready",
                            },
                        },
                        {
                            "id": "les_pdf",
                            "title": "Handbook",
                            "order": 2,
                            "lesson_type": "pdf",
                        },
                        {
                            "id": "les_youtube",
                            "title": "Community Tour",
                            "order": 3,
                            "lesson_type": "multi",
                            "embed": {"id": "yt_abc", "type": "youtube"},
                        },
                    ],
                }
            ],
        }
    )

    return StubCatalogAdapter(
        courses={COMPANY_ID: [course]},
        companies={COMPANY_ID: Company(id=COMPANY_ID, title="Acme", route="acme")},
        experiences={
            COMPANY_ID: [
                Experience(id="exp_chat", name="Chat", app_name="Chat"),
                Experience(id="exp_courses", name="Academy", app_name="Courses"),
            ]
        },
    )


@pytest.fixture
def storage():
    """Stub blob storage."""
    from knowledge_portal.adapters.storage import StubBlobStorage

    return StubBlobStorage()


@pytest.fixture
def notifier():
    """Stub webhook notifier."""
    from knowledge_portal.adapters.notifier import StubNotifier

    return StubNotifier()


@pytest.fixture
def summary_generator():
    """Stub summary PDF generator."""
    from knowledge_portal.adapters.summary import StubSummaryGenerator

    return StubSummaryGenerator(base_url=STORAGE_BASE)


@pytest.fixture
def lifecycle(store, catalog, storage, notifier, summary_generator):
    """Lifecycle service wired to stub adapters."""
    from knowledge_portal.config import get_settings
    from knowledge_portal.services.lifecycle import LessonLifecycleService

    return LessonLifecycleService(
        store=store,
        catalog=catalog,
        storage=storage,
        notifier=notifier,
        summary=summary_generator,
        settings=get_settings(),
    )


@pytest.fixture
def aggregator(catalog, store):
    """Course aggregator over the stub catalog."""
    from knowledge_portal.services.aggregator import CourseAggregator

    return CourseAggregator(catalog=catalog, store=store)


@pytest.fixture
def make_record(store) -> Callable[..., Any]:
    """Persist a training record directly, bypassing lifecycle validation."""
    from datetime import UTC, datetime

    from knowledge_portal.domain import TrainingStatus, TrainingStatusRecord

    def _make(
        lesson_id: str = "les_video",
        status: TrainingStatus = TrainingStatus.TRAINED,
        company_id: str = COMPANY_ID,
        **fields: Any,
    ):
        artifacts = {
            key: fields.pop(key)
            for key in ("transcription_file", "lesson_summary_pdf")
            if key in fields
        }
        record = TrainingStatusRecord(
            company_id=company_id,
            course_id=fields.pop("course_id", "cors_1"),
            lesson_id=lesson_id,
            title=fields.pop("title", "Welcome"),
            status=status,
            video_source_type=fields.pop("video_source_type", "mux"),
            trained_at=datetime.now(UTC) if status == TrainingStatus.TRAINED else None,
            **fields,
        )
        stored = store.upsert(record)
        if artifacts:
            stored = store.update_fields(company_id, lesson_id, **artifacts)
        return stored

    return _make


@pytest.fixture
def auth_adapter():
    """Stub identity provider with an admin, a client and an unlinked user."""
    from knowledge_portal.adapters.auth import AuthUser, StubAuthAdapter

    return StubAuthAdapter(
        users={
            "admin-token": AuthUser(id="user-admin", user_metadata={"role": "admin"}),
            "client-token": AuthUser(id="user-client", email="owner@acme.test"),
            "unlinked-token": AuthUser(id="user-unlinked"),
        }
    )


@pytest.fixture
def test_client(
    db_session, catalog, storage, notifier, summary_generator, auth_adapter
) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app with stub adapters."""
    from knowledge_portal.db.models import ClientModel
    from knowledge_portal.db.session import get_session
    from knowledge_portal.main import app
    from knowledge_portal.services import providers

    db_session.add(ClientModel(name="Acme", user_id="user-client", whop_company_id=COMPANY_ID))
    db_session.commit()

    app.dependency_overrides[get_session] = lambda: db_session
    app.dependency_overrides[providers.get_catalog_adapter] = lambda: catalog
    app.dependency_overrides[providers.get_storage_adapter] = lambda: storage
    app.dependency_overrides[providers.get_notifier] = lambda: notifier
    app.dependency_overrides[providers.get_summary_generator] = lambda: summary_generator
    app.dependency_overrides[providers.get_auth_adapter] = lambda: auth_adapter

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
