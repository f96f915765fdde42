"""Shared enums for models and API."""

from enum import Enum


class SetSource(str, Enum):
    """Where a set record came from."""

    MANUAL = "manual"  # Typed into the manual entry form
    QUICKBUTTON = "quickbutton"  # Committed from the quick-entry buffer


class ApiErrorCode(str, Enum):
    """Error codes returned alongside HTTP errors."""

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BufferMessageKind(str, Enum):
    """Transient user-facing messages emitted by the quick-entry buffer."""

    RANGE_REJECTED = "range_rejected"
    DECREMENT_REJECTED = "decrement_rejected"
    COMMIT_FAILED = "commit_failed"
    COMMITTED = "committed"
    HISTORY_FAILED = "history_failed"
