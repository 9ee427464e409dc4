"""User-facing failure messages and recovery suggestions."""

from __future__ import annotations

from nomnom.recovery.error_types import ErrorCategory, OperationKind

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."
ABORT_SUGGESTION = "Operation aborted due to critical error"

_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.NETWORK_FAILURE: "Network connection error. Please check your internet connection.",
    ErrorCategory.STORAGE_FAILURE: "Storage error. Please check available space and try again.",
    ErrorCategory.PERMISSION_DENIED: "Permission denied. Please check app permissions.",
    ErrorCategory.VALIDATION_FAILURE: "Invalid data. Please check your input and try again.",
    ErrorCategory.TRANSIENT_FAILURE: "The data is busy right now. Please try again in a moment.",
}

_CATEGORY_SUGGESTIONS: dict[ErrorCategory, tuple[str, ...]] = {
    ErrorCategory.NETWORK_FAILURE: (
        "Check your internet connection",
        "Try switching to a different network",
        "Wait a moment and try again",
    ),
    ErrorCategory.STORAGE_FAILURE: (
        "Check available storage space",
        "Close other apps to free up memory",
        "Restart the app if the problem persists",
    ),
    ErrorCategory.PERMISSION_DENIED: (
        "Check app permissions in device settings",
        "Grant necessary permissions and try again",
    ),
    ErrorCategory.VALIDATION_FAILURE: (
        "Check the highlighted fields for errors",
        "Ensure all required information is provided",
        "Verify that the data format is correct",
    ),
    ErrorCategory.TRANSIENT_FAILURE: (
        "Wait a moment and try again",
        "Close other windows editing the same item",
    ),
}

_KIND_SUGGESTIONS: dict[OperationKind, tuple[str, ...]] = {
    OperationKind.SAVE: (
        "Try saving again",
        "Check that all required fields are filled",
        "Ensure you have sufficient storage space",
    ),
    OperationKind.LOAD: (
        "Try refreshing the data",
        "Check your internet connection",
        "Restart the app if the problem persists",
    ),
    OperationKind.DELETE: (
        "Try the delete operation again",
        "Ensure the item still exists",
        "Check if the item is being used elsewhere",
    ),
    OperationKind.UPLOAD: (
        "Check your internet connection",
        "Ensure the file is not too large",
        "Try uploading again",
    ),
    OperationKind.DOWNLOAD: (
        "Check your internet connection",
        "Ensure you have sufficient storage space",
        "Try downloading again",
    ),
    OperationKind.VALIDATION: (
        "Fix the validation errors",
        "Check the highlighted fields",
        "Ensure all required information is provided",
    ),
}


def error_message(category: ErrorCategory) -> str:
    """Return the user-facing message for a failure category."""
    return _MESSAGES.get(category, GENERIC_ERROR_MESSAGE)


def recovery_suggestions(category: ErrorCategory, kind: OperationKind) -> list[str]:
    """
    Return ordered suggestions for a failure.

    Operation-kind lists are only used when the category is unknown.
    """

    if category in _CATEGORY_SUGGESTIONS:
        return list(_CATEGORY_SUGGESTIONS[category])
    return list(_KIND_SUGGESTIONS[kind])
