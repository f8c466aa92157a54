"""Database layer."""

from knowledge_portal.db.models import (
    Base,
    ClientModel,
    LessonTrainingModel,
    UserRoleModel,
)
from knowledge_portal.db.session import get_session, get_session_context, init_db

__all__ = [
    "Base",
    "get_session",
    "get_session_context",
    "init_db",
    # Models
    "ClientModel",
    "LessonTrainingModel",
    "UserRoleModel",
]
