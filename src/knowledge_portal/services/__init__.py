"""Application services."""

from knowledge_portal.services.aggregator import (
    CourseAggregator,
    LessonView,
    MergedChapter,
    MergedCourse,
    MergedLesson,
    MergedView,
    TrainingStats,
)
from knowledge_portal.services.lesson_links import (
    LinkContext,
    build_lesson_url,
    resolve_link_context,
)
from knowledge_portal.services.lifecycle import LessonLifecycleService
from knowledge_portal.services.training_store import TrainingStatusStore
from knowledge_portal.services.video_source import NormalizedVideo, normalize_video_source

__all__ = [
    "CourseAggregator",
    "LessonLifecycleService",
    "LessonView",
    "LinkContext",
    "MergedChapter",
    "MergedCourse",
    "MergedLesson",
    "MergedView",
    "NormalizedVideo",
    "TrainingStats",
    "TrainingStatusStore",
    "build_lesson_url",
    "normalize_video_source",
    "resolve_link_context",
]
