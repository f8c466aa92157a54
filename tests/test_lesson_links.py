"""Tests for lesson deep links."""

import pytest

from knowledge_portal.services.lesson_links import (
    LinkContext,
    build_lesson_url,
    resolve_link_context,
)


def test_build_lesson_url() -> None:
    url = build_lesson_url("acme", "exp_courses", "cors_1", "les_1")

    assert url == "https://whop.com/joined/acme/lessons-exp_courses/app/courses/cors_1/lessons/les_1/"


def test_build_lesson_url_custom_base() -> None:
    url = build_lesson_url("acme", "exp_1", "cors_1", "les_1", base_url="https://portal.test/j/")

    assert url == "https://portal.test/j/acme/lessons-exp_1/app/courses/cors_1/lessons/les_1/"


@pytest.mark.parametrize(
    "slug,experience",
    [(None, "exp_1"), ("acme", None), ("", "exp_1")],
)
def test_build_lesson_url_missing_parts(slug, experience) -> None:
    """Test no URL is produced without both the slug and the experience."""
    assert build_lesson_url(slug, experience, "cors_1", "les_1") is None


@pytest.mark.asyncio
async def test_resolve_link_context(catalog) -> None:
    """Test the Courses experience is selected among the company's experiences."""
    context = await resolve_link_context(catalog, "biz_acme")

    assert context == LinkContext(company_slug="acme", experience_id="exp_courses")
    assert context.complete is True


@pytest.mark.asyncio
async def test_resolve_link_context_tolerates_failures(catalog) -> None:
    """Test each lookup failing independently leaves only that part unset."""
    catalog.failing = {"retrieve_company"}
    context = await resolve_link_context(catalog, "biz_acme")
    assert context.company_slug is None
    assert context.experience_id == "exp_courses"

    catalog.failing = {"list_experiences"}
    context = await resolve_link_context(catalog, "biz_acme")
    assert context.company_slug == "acme"
    assert context.experience_id is None


@pytest.mark.asyncio
async def test_resolve_link_context_without_courses_app(catalog) -> None:
    catalog.experiences["biz_acme"] = []

    context = await resolve_link_context(catalog, "biz_acme")

    assert context.experience_id is None
    assert context.complete is False


def test_link_context_fallback() -> None:
    context = LinkContext(company_slug="live").or_fallback("cached", "exp_cached")

    assert context == LinkContext(company_slug="live", experience_id="exp_cached")
