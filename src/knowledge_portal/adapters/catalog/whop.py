"""Whop REST API course catalog adapter."""

from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from knowledge_portal.adapters.catalog.base import (
    CatalogAdapter,
    CatalogCourse,
    CatalogCourseDetail,
    CatalogError,
    CatalogLesson,
    Company,
    Experience,
)
from knowledge_portal.config import settings
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Safety cap on cursor pagination
MAX_PAGES = 50


class WhopCatalogAdapter(CatalogAdapter):
    """Course catalog backed by the Whop API (courses, course_lessons, experiences)."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.whop_api_key
        self.base_url = (base_url or settings.whop_api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.catalog_timeout
        self.transport = transport

        if not self.api_key:
            logger.warning("Whop API key not configured")

    @property
    def name(self) -> str:
        return "whop"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        if not self.api_key:
            raise CatalogError("Whop API key not configured")

        try:
            async with self._client() as client:
                response = await client.get(path, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "whop_api_error",
                path=path,
                status_code=e.response.status_code,
                body=e.response.text[:500],
            )
            raise CatalogError(
                f"Whop API error: {e.response.status_code} on {path}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("whop_request_failed", path=path, error=str(e))
            raise CatalogError(f"Whop request failed on {path}: {e}") from e
        except ValueError as e:
            # 200 with a non-JSON body, e.g. a proxy maintenance page
            logger.error("whop_invalid_json", path=path, error=str(e))
            raise CatalogError(f"Whop returned invalid JSON on {path}") from e

        if not isinstance(data, dict):
            logger.error("whop_unexpected_payload", path=path, payload_type=type(data).__name__)
            raise CatalogError(f"Whop returned an unexpected payload on {path}")
        return data

    def _parse(self, path: str, parser: Callable[[dict[str, Any]], T], payload: Any) -> T:
        """Build a catalog model, reporting malformed payloads as CatalogError."""
        try:
            return parser(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("whop_payload_invalid", path=path, error=repr(e))
            raise CatalogError(f"Malformed Whop payload on {path}: {e!r}") from e

    async def _list(self, path: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Collect every page of a cursor-paginated list endpoint."""
        items: list[dict[str, Any]] = []
        query = dict(params)

        for _ in range(MAX_PAGES):
            data = await self._get(path, query)
            page = data.get("data") or []
            if not isinstance(page, list):
                raise CatalogError(f"Whop returned an unexpected list payload on {path}")
            items.extend(page)

            page_info = data.get("page_info") or {}
            if not isinstance(page_info, dict):
                break
            cursor = page_info.get("end_cursor")
            if not page_info.get("has_next_page") or not cursor:
                break
            query["after"] = cursor
        else:
            logger.warning("whop_pagination_truncated", path=path, items=len(items))

        return items

    async def list_courses(self, company_id: str) -> list[CatalogCourse]:
        items = await self._list("/courses", {"company_id": company_id})
        logger.info("whop_courses_listed", company_id=company_id, count=len(items))
        return [self._parse("/courses", CatalogCourse.from_payload, item) for item in items]

    async def retrieve_course(self, course_id: str) -> CatalogCourseDetail:
        path = f"/courses/{course_id}"
        return self._parse(path, CatalogCourseDetail.from_payload, await self._get(path))

    async def list_lessons(self, chapter_id: str) -> list[CatalogLesson]:
        items = await self._list("/course_lessons", {"chapter_id": chapter_id})
        return [self._parse("/course_lessons", CatalogLesson.from_payload, item) for item in items]

    async def retrieve_lesson(self, lesson_id: str) -> CatalogLesson:
        path = f"/course_lessons/{lesson_id}"
        return self._parse(path, CatalogLesson.from_payload, await self._get(path))

    async def list_experiences(self, company_id: str) -> list[Experience]:
        items = await self._list("/experiences", {"company_id": company_id})
        return [self._parse("/experiences", Experience.from_payload, item) for item in items]

    async def retrieve_company(self, company_id: str) -> Company:
        path = f"/companies/{company_id}"
        return self._parse(path, Company.from_payload, await self._get(path))

    async def health_check(self) -> bool:
        return bool(self.api_key)
