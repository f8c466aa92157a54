"""Course catalog adapters."""

from knowledge_portal.adapters.catalog.base import (
    CatalogAdapter,
    CatalogChapter,
    CatalogCourse,
    CatalogCourseDetail,
    CatalogError,
    CatalogLesson,
    Company,
    Experience,
)
from knowledge_portal.adapters.catalog.stub import StubCatalogAdapter
from knowledge_portal.adapters.catalog.whop import WhopCatalogAdapter

__all__ = [
    "CatalogAdapter",
    "CatalogChapter",
    "CatalogCourse",
    "CatalogCourseDetail",
    "CatalogError",
    "CatalogLesson",
    "Company",
    "Experience",
    "StubCatalogAdapter",
    "WhopCatalogAdapter",
]
