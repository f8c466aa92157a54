"""Tests for adapter implementations."""

import json

import httpx
import pytest

from knowledge_portal.adapters.auth import StubAuthAdapter, SupabaseAuthAdapter
from knowledge_portal.adapters.catalog import CatalogError, WhopCatalogAdapter
from knowledge_portal.adapters.notifier import WebhookNotifier
from knowledge_portal.adapters.storage import StubBlobStorage, SupabaseBlobStorage
from knowledge_portal.adapters.summary import SupabaseSummaryGenerator

SUPABASE_URL = "https://proj.supabase.test"


def whop_adapter(handler) -> WhopCatalogAdapter:
    return WhopCatalogAdapter(
        api_key="whop-key",
        base_url="https://api.whop.test/api/v1",
        transport=httpx.MockTransport(handler),
    )


# =============================================================================
# Whop catalog
# =============================================================================


@pytest.mark.asyncio
async def test_whop_list_courses_follows_pagination() -> None:
    """Test every cursor page is collected."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.params.get("after") == "cur_2":
            return httpx.Response(
                200,
                json={"data": [{"id": "cors_2", "title": "Two"}], "page_info": {"has_next_page": False}},
            )
        return httpx.Response(
            200,
            json={
                "data": [{"id": "cors_1", "title": "One", "thumbnail": {"url": "https://img.test/1.png"}}],
                "page_info": {"has_next_page": True, "end_cursor": "cur_2"},
            },
        )

    courses = await whop_adapter(handler).list_courses("biz_acme")

    assert [course.id for course in courses] == ["cors_1", "cors_2"]
    assert courses[0].thumbnail_url == "https://img.test/1.png"
    assert requests[0].url.path == "/api/v1/courses"
    assert requests[0].url.params["company_id"] == "biz_acme"
    assert requests[0].headers["Authorization"] == "Bearer whop-key"
    assert len(requests) == 2


@pytest.mark.asyncio
async def test_whop_retrieve_course_parses_tree() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/courses/cors_1"
        return httpx.Response(
            200,
            json={
                "id": "cors_1",
                "title": "Onboarding",
                "chapters": [
                    {
                        "id": "chap_1",
                        "title": "Start",
                        "order": 1,
                        "lessons": [
                            {"id": "les_1", "title": "Intro", "lesson_type": "multi", "embedId": "yt_1", "embedType": "youtube"},
                        ],
                    }
                ],
            },
        )

    course = await whop_adapter(handler).retrieve_course("cors_1")

    assert course.lesson_ids() == {"les_1"}
    lesson = course.chapters[0].lessons[0]
    assert lesson.embed_id == "yt_1"
    assert lesson.embed_type == "youtube"


@pytest.mark.asyncio
async def test_whop_experiences_and_company() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/experiences"):
            return httpx.Response(
                200,
                json={"data": [{"id": "exp_1", "name": "Academy", "app": {"name": "Courses"}}]},
            )
        return httpx.Response(200, json={"id": "biz_acme", "title": "Acme", "route": "acme"})

    adapter = whop_adapter(handler)

    experiences = await adapter.list_experiences("biz_acme")
    company = await adapter.retrieve_company("biz_acme")

    assert experiences[0].app_name == "Courses"
    assert company.route == "acme"


@pytest.mark.asyncio
async def test_whop_http_error_raises_catalog_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(CatalogError, match="503"):
        await whop_adapter(handler).retrieve_lesson("les_1")


@pytest.mark.asyncio
async def test_whop_transport_error_raises_catalog_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CatalogError):
        await whop_adapter(handler).list_lessons("chap_1")


@pytest.mark.asyncio
async def test_whop_non_json_body_raises_catalog_error() -> None:
    """Test a 200 maintenance page is reported as a catalog failure."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    adapter = whop_adapter(handler)

    with pytest.raises(CatalogError, match="invalid JSON"):
        await adapter.retrieve_company("biz_acme")
    with pytest.raises(CatalogError, match="invalid JSON"):
        await adapter.list_experiences("biz_acme")


@pytest.mark.asyncio
async def test_whop_payload_missing_id_raises_catalog_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/courses"):
            return httpx.Response(200, json={"data": [{"title": "No id"}]})
        return httpx.Response(200, json={"title": "Acme"})

    adapter = whop_adapter(handler)

    with pytest.raises(CatalogError, match="Malformed"):
        await adapter.retrieve_company("biz_acme")
    with pytest.raises(CatalogError, match="Malformed"):
        await adapter.list_courses("biz_acme")


@pytest.mark.asyncio
async def test_whop_non_object_payload_raises_catalog_error() -> None:
    adapter = whop_adapter(lambda r: httpx.Response(200, json=["not", "an", "object"]))

    with pytest.raises(CatalogError, match="unexpected payload"):
        await adapter.retrieve_course("cors_1")


@pytest.mark.asyncio
async def test_whop_without_api_key(monkeypatch) -> None:
    from knowledge_portal.config import settings

    monkeypatch.setattr(settings, "whop_api_key", None)
    adapter = WhopCatalogAdapter(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

    assert await adapter.health_check() is False
    with pytest.raises(CatalogError, match="not configured"):
        await adapter.list_courses("biz_acme")


# =============================================================================
# Storage
# =============================================================================


@pytest.mark.asyncio
async def test_supabase_storage_remove_objects() -> None:
    """Test removal sends the paths as prefixes with the service key."""
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        captured["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json=[{"name": "biz_acme/les_1.vtt"}])

    storage = SupabaseBlobStorage(
        supabase_url=SUPABASE_URL,
        service_key="service-key",
        transport=httpx.MockTransport(handler),
    )

    result = await storage.remove_objects("transcriptions", ["biz_acme/les_1.vtt", "biz_acme/les_1-summary.pdf"])

    assert result.success is True
    assert result.deleted == ["biz_acme/les_1.vtt"]
    assert captured["method"] == "DELETE"
    assert captured["url"] == f"{SUPABASE_URL}/storage/v1/object/transcriptions"
    assert captured["body"] == {"prefixes": ["biz_acme/les_1.vtt", "biz_acme/les_1-summary.pdf"]}
    assert captured["auth"] == "Bearer service-key"


@pytest.mark.asyncio
async def test_supabase_storage_reports_errors() -> None:
    storage = SupabaseBlobStorage(
        supabase_url=SUPABASE_URL,
        service_key="service-key",
        transport=httpx.MockTransport(lambda r: httpx.Response(400, text="Bucket not found")),
    )

    result = await storage.remove_objects("transcriptions", ["a.vtt"])

    assert result.success is False
    assert "400" in result.error


@pytest.mark.asyncio
async def test_supabase_storage_not_configured(monkeypatch) -> None:
    from knowledge_portal.config import settings

    monkeypatch.setattr(settings, "supabase_service_role_key", None)
    storage = SupabaseBlobStorage(supabase_url=SUPABASE_URL)

    result = await storage.remove_objects("transcriptions", ["a.vtt"])

    assert result.success is False
    assert await storage.health_check() is False


@pytest.mark.asyncio
async def test_stub_storage_ignores_missing_objects() -> None:
    storage = StubBlobStorage()
    storage.put("transcriptions", "a.vtt")

    result = await storage.remove_objects("transcriptions", ["a.vtt", "missing.pdf"])

    assert result.deleted == ["a.vtt"]
    assert storage.objects["transcriptions"] == set()


# =============================================================================
# Notifier
# =============================================================================


@pytest.mark.asyncio
async def test_webhook_notifier_posts_payload() -> None:
    received = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append(json.loads(request.content))
        return httpx.Response(200)

    notifier = WebhookNotifier(transport=httpx.MockTransport(handler))

    delivered = await notifier.notify("https://hooks.test/update", {"action": "update", "lesson_id": "les_1"})

    assert delivered is True
    assert received == [{"action": "update", "lesson_id": "les_1"}]


@pytest.mark.asyncio
async def test_webhook_notifier_failures_return_false() -> None:
    """Test rejections and transport errors are reported, not raised."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    rejected = WebhookNotifier(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
    unreachable = WebhookNotifier(transport=httpx.MockTransport(refuse))

    assert await rejected.notify("https://hooks.test/update", {"action": "update"}) is False
    assert await unreachable.notify("https://hooks.test/update", {"action": "update"}) is False


# =============================================================================
# Summary generator
# =============================================================================


@pytest.mark.asyncio
async def test_supabase_summary_generator_success() -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"lesson_summary_pdf": "https://files.test/les_1-summary.pdf"})

    generator = SupabaseSummaryGenerator(
        supabase_url=SUPABASE_URL,
        anon_key="anon-key",
        function_name="generate-lesson-summary",
        transport=httpx.MockTransport(handler),
    )

    result = await generator.generate("les_1", "biz_acme")

    assert result.success is True
    assert result.artifact_url == "https://files.test/les_1-summary.pdf"
    assert captured["url"] == f"{SUPABASE_URL}/functions/v1/generate-lesson-summary"
    assert captured["body"] == {"lesson_id": "les_1", "company_id": "biz_acme"}


@pytest.mark.asyncio
async def test_supabase_summary_generator_upstream_error() -> None:
    """Test the upstream status and error message are carried back."""
    generator = SupabaseSummaryGenerator(
        supabase_url=SUPABASE_URL,
        anon_key="anon-key",
        transport=httpx.MockTransport(
            lambda r: httpx.Response(404, json={"error": "Transcript not found"})
        ),
    )

    result = await generator.generate("les_1", "biz_acme")

    assert result.success is False
    assert result.status_code == 404
    assert result.error_message == "Transcript not found"


@pytest.mark.asyncio
async def test_supabase_summary_generator_missing_url_in_response() -> None:
    generator = SupabaseSummaryGenerator(
        supabase_url=SUPABASE_URL,
        anon_key="anon-key",
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})),
    )

    result = await generator.generate("les_1", "biz_acme")

    assert result.success is False
    assert result.status_code is None


# =============================================================================
# Auth
# =============================================================================


@pytest.mark.asyncio
async def test_supabase_auth_resolves_user() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer session-token"
        assert request.headers["apikey"] == "anon-key"
        return httpx.Response(
            200,
            json={"id": "user-1", "email": "a@acme.test", "user_metadata": {"role": "admin"}},
        )

    auth = SupabaseAuthAdapter(
        supabase_url=SUPABASE_URL,
        anon_key="anon-key",
        transport=httpx.MockTransport(handler),
    )

    user = await auth.get_user("session-token")

    assert user.id == "user-1"
    assert user.user_metadata == {"role": "admin"}


@pytest.mark.asyncio
async def test_supabase_auth_rejected_token() -> None:
    auth = SupabaseAuthAdapter(
        supabase_url=SUPABASE_URL,
        anon_key="anon-key",
        transport=httpx.MockTransport(lambda r: httpx.Response(401, json={"msg": "invalid JWT"})),
    )

    assert await auth.get_user("expired") is None


@pytest.mark.asyncio
async def test_stub_auth_unknown_token() -> None:
    assert await StubAuthAdapter().get_user("nope") is None
