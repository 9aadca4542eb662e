"""Domain error codes for the planner client."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    REQUEST_FAILED = "REQUEST_FAILED"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    NO_ACTIVE_EVENT = "NO_ACTIVE_EVENT"
    SYNC_ERROR = "SYNC_ERROR"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_EVENT = "INVALID_EVENT"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class RequestFailedError(DomainError):
    """Raised when the events API is unreachable, answers non-2xx, or sends an unreadable payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(
            code=ErrorCode.REQUEST_FAILED,
            message=message,
        )
        self.status_code = status_code


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class NoActiveEventError(DomainError):
    """Raised when an update is attempted with no event loaded."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NO_ACTIVE_EVENT,
            message="No event is loaded to update",
        )


class SyncError(DomainError):
    """Raised when a locally applied update could not be confirmed by the server.

    The local changes are kept; `cause` holds the error reported by the store.
    """

    def __init__(self, event_id: str, cause: DomainError) -> None:
        super().__init__(
            code=ErrorCode.SYNC_ERROR,
            message="Changes were saved locally but could not be synchronized with the server",
        )
        self.event_id = event_id
        self.cause = cause


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidEventError(DomainError):
    """Raised when an event draft is missing required fields."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT,
            message=f"Missing required fields: {', '.join(missing)}",
        )
        self.missing = missing
