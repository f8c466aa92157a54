"""Domain enumerations."""

from enum import StrEnum


class TrainingStatus(StrEnum):
    """Status of a lesson in the training pipeline."""

    PENDING = "pending"
    TRANSCRIBING = "transcribing"
    TRANSCRIBE_FAILED = "transcribe_failed"
    TRANSCRIBED = "transcribed"
    TRAINING = "training"
    TRAIN_FAILED = "train_failed"
    TRAINED = "trained"

    @classmethod
    def parse(cls, value: str | None) -> "TrainingStatus | None":
        """Return the matching status, or None for unknown values."""
        try:
            return cls(value)
        except ValueError:
            return None


# Outgoing transitions for an existing record. Self-transitions are always allowed.
ALLOWED_TRANSITIONS: dict[TrainingStatus, frozenset[TrainingStatus]] = {
    TrainingStatus.PENDING: frozenset({TrainingStatus.TRANSCRIBING}),
    TrainingStatus.TRANSCRIBING: frozenset(
        {TrainingStatus.TRANSCRIBED, TrainingStatus.TRANSCRIBE_FAILED}
    ),
    TrainingStatus.TRANSCRIBE_FAILED: frozenset(
        {TrainingStatus.TRANSCRIBING, TrainingStatus.PENDING}
    ),
    TrainingStatus.TRANSCRIBED: frozenset({TrainingStatus.TRAINING}),
    TrainingStatus.TRAINING: frozenset({TrainingStatus.TRAINED, TrainingStatus.TRAIN_FAILED}),
    TrainingStatus.TRAIN_FAILED: frozenset({TrainingStatus.TRAINING, TrainingStatus.PENDING}),
    TrainingStatus.TRAINED: frozenset(),
}


def can_transition(current: TrainingStatus, target: TrainingStatus) -> bool:
    """Check whether an existing record may move from current to target."""
    return current == target or target in ALLOWED_TRANSITIONS[current]


class VideoSourceType(StrEnum):
    """Where a lesson's video is hosted."""

    MUX = "mux"  # Hosted by the platform's streaming provider
    YOUTUBE = "youtube"
    LOOM = "loom"


class EmbedType(StrEnum):
    """Embedded (third-party) video kinds."""

    YOUTUBE = "youtube"
    LOOM = "loom"


class LessonType(StrEnum):
    """Catalog lesson kinds."""

    MULTI = "multi"  # Video-bearing lesson
    PDF = "pdf"
    TEXT = "text"
    QUIZ = "quiz"


class UserRole(StrEnum):
    """Portal user roles."""

    ADMIN = "admin"
    CLIENT = "client"


class WebhookAction(StrEnum):
    """Actions reported to the downstream automation webhook."""

    UPDATE = "update"
    DELETE = "delete"
