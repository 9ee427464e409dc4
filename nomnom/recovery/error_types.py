"""Error typing for retry and recovery decisions."""

from __future__ import annotations

from enum import Enum


class OperationKind(str, Enum):
    """Coarse kind of wrapped operation, used as a tiebreaker for unknown errors."""

    SAVE = "save"
    LOAD = "load"
    DELETE = "delete"
    UPLOAD = "upload"
    DOWNLOAD = "download"
    VALIDATION = "validation"


class ErrorCategory(str, Enum):
    """Closed set of failure categories, in classification priority order."""

    PERMISSION_DENIED = "permission_denied"
    VALIDATION_FAILURE = "validation_failure"
    NETWORK_FAILURE = "network_failure"
    STORAGE_FAILURE = "storage_failure"
    TRANSIENT_FAILURE = "transient_failure"
    UNKNOWN = "unknown"


class RecoveryError(RuntimeError):
    """Runtime error carrying an explicit failure category.

    Storage, photo and network collaborators raise these so the classifier
    does not have to guess from the message text.
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, category: ErrorCategory | None = None) -> None:
        super().__init__(message)
        if category is not None:
            self.category = category


class PermissionDeniedError(RecoveryError):
    category = ErrorCategory.PERMISSION_DENIED


class ValidationFailedError(RecoveryError):
    category = ErrorCategory.VALIDATION_FAILURE


class NetworkFailureError(RecoveryError):
    category = ErrorCategory.NETWORK_FAILURE


class StorageFailureError(RecoveryError):
    category = ErrorCategory.STORAGE_FAILURE


class TransientFailureError(RecoveryError):
    category = ErrorCategory.TRANSIENT_FAILURE


# First match wins; non-retryable categories come before retryable ones.
_KEYWORD_RULES: tuple[tuple[ErrorCategory, tuple[str, ...]], ...] = (
    (ErrorCategory.PERMISSION_DENIED, ("permission denied", "unauthorized", "forbidden")),
    (ErrorCategory.VALIDATION_FAILURE, ("validation", "invalid", "format")),
    (ErrorCategory.NETWORK_FAILURE, ("network", "connection", "timeout", "unreachable")),
    (ErrorCategory.STORAGE_FAILURE, ("storage", "database", "file", "disk")),
    (ErrorCategory.TRANSIENT_FAILURE, ("busy", "locked", "temporary")),
)

_NON_RETRYABLE = frozenset({ErrorCategory.PERMISSION_DENIED, ErrorCategory.VALIDATION_FAILURE})


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(token in text for token in keywords)


def _classify_message(text: str) -> ErrorCategory:
    """Classify free-form failure text by keyword priority."""
    lowered = (text or "").lower()
    for category, keywords in _KEYWORD_RULES:
        if _contains_any(lowered, keywords):
            return category
    return ErrorCategory.UNKNOWN


def classify_error(error: BaseException | str) -> ErrorCategory:
    """
    Classify an exception/string into an ErrorCategory.

    Tagged RecoveryError instances are trusted as-is. Everything else goes
    through keyword matching first, so a TimeoutError whose message says
    "invalid" still classifies as a validation failure. Built-in permission,
    timeout and connection errors are only used when the text says nothing.
    """

    if isinstance(error, RecoveryError):
        return error.category

    category = _classify_message(str(error))
    if category is not ErrorCategory.UNKNOWN or isinstance(error, str):
        return category

    if isinstance(error, PermissionError):
        return ErrorCategory.PERMISSION_DENIED
    if isinstance(error, (TimeoutError, ConnectionError)):
        return ErrorCategory.NETWORK_FAILURE
    return ErrorCategory.UNKNOWN


def is_retryable_category(category: ErrorCategory) -> bool:
    """Return whether failures of this category may consume the retry budget."""
    return category not in _NON_RETRYABLE
