"""Error taxonomy for portal operations.

Every error carries the HTTP status code it maps to at the API boundary and a
``details`` dict that is returned to the caller alongside the message.
"""

from typing import Any


class PortalError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Response body for this error."""
        return {"error": self.message, **self.details}


class ValidationError(PortalError):
    """Bad input shape, missing required field or unknown status."""

    status_code = 400


class InvalidStateError(PortalError):
    """The record's current status does not permit the operation."""

    status_code = 400


class VideoProcessingError(PortalError):
    """The hosted video asset is not ready upstream yet."""

    status_code = 400

    def __init__(self, video_status: str) -> None:
        super().__init__(
            f"Video is still processing (status: {video_status}). "
            "playback_id will be available when the video is ready.",
            video_status=video_status,
        )
        self.video_status = video_status


class NotFoundError(PortalError):
    """No training record or catalog entry exists for the tenant."""

    status_code = 404


class ConflictError(PortalError):
    """The requested artifact already exists."""

    status_code = 409


class StorageError(PortalError):
    """Blob storage cleanup failed; the database record was left intact."""

    status_code = 500

    def __init__(self, message: str, files_attempted: list[str], **details: Any) -> None:
        super().__init__(message, files_attempted=files_attempted, **details)
        self.files_attempted = files_attempted


class NotifyError(PortalError):
    """A downstream service (summary generator) failed or was unreachable."""

    status_code = 502

    def __init__(self, message: str, status_code: int | None = None, **details: Any) -> None:
        super().__init__(message, **details)
        if status_code is not None:
            self.status_code = status_code


class AuthenticationError(PortalError):
    """Missing or invalid credentials."""

    status_code = 401


class AuthorizationError(PortalError):
    """Authenticated user may not act on the requested tenant."""

    status_code = 403


class CatalogUnavailableError(PortalError):
    """The course catalog could not be queried for a read that has no fallback."""

    status_code = 502
