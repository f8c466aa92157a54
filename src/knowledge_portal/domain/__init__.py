"""Domain models and business logic."""

from knowledge_portal.domain.enums import (
    ALLOWED_TRANSITIONS,
    EmbedType,
    LessonType,
    TrainingStatus,
    UserRole,
    VideoSourceType,
    WebhookAction,
    can_transition,
)
from knowledge_portal.domain.errors import (
    AuthenticationError,
    AuthorizationError,
    CatalogUnavailableError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    NotifyError,
    PortalError,
    StorageError,
    ValidationError,
    VideoProcessingError,
)
from knowledge_portal.domain.models import RequestContext, TrainingStatusRecord

__all__ = [
    "ALLOWED_TRANSITIONS",
    "AuthenticationError",
    "AuthorizationError",
    "CatalogUnavailableError",
    "ConflictError",
    "EmbedType",
    "InvalidStateError",
    "LessonType",
    "NotFoundError",
    "NotifyError",
    "PortalError",
    "RequestContext",
    "StorageError",
    "TrainingStatus",
    "TrainingStatusRecord",
    "UserRole",
    "ValidationError",
    "VideoProcessingError",
    "VideoSourceType",
    "WebhookAction",
    "can_transition",
]
