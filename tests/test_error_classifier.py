import pytest

from nomnom.recovery.error_types import (
    ErrorCategory,
    NetworkFailureError,
    PermissionDeniedError,
    RecoveryError,
    StorageFailureError,
    classify_error,
    is_retryable_category,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Permission denied while writing photo", ErrorCategory.PERMISSION_DENIED),
        ("401 Unauthorized", ErrorCategory.PERMISSION_DENIED),
        ("Forbidden", ErrorCategory.PERMISSION_DENIED),
        ("validation: title required", ErrorCategory.VALIDATION_FAILURE),
        ("Invalid servings count", ErrorCategory.VALIDATION_FAILURE),
        ("unsupported image format", ErrorCategory.VALIDATION_FAILURE),
        ("Network is down", ErrorCategory.NETWORK_FAILURE),
        ("connection refused", ErrorCategory.NETWORK_FAILURE),
        ("request timeout", ErrorCategory.NETWORK_FAILURE),
        ("host unreachable", ErrorCategory.NETWORK_FAILURE),
        ("database disk image is malformed", ErrorCategory.STORAGE_FAILURE),
        ("could not open file", ErrorCategory.STORAGE_FAILURE),
        ("storage full", ErrorCategory.STORAGE_FAILURE),
        ("resource busy", ErrorCategory.TRANSIENT_FAILURE),
        ("table locked", ErrorCategory.TRANSIENT_FAILURE),
        ("Temporary glitch", ErrorCategory.TRANSIENT_FAILURE),
        ("something odd happened", ErrorCategory.UNKNOWN),
        ("", ErrorCategory.UNKNOWN),
    ],
)
def test_classify_keywords(text: str, expected: ErrorCategory) -> None:
    assert classify_error(text) is expected
    assert classify_error(RuntimeError(text)) is expected


def test_non_retryable_keywords_win_over_retryable_ones() -> None:
    assert classify_error("timeout while parsing invalid payload") is ErrorCategory.VALIDATION_FAILURE
    assert classify_error("forbidden: database access") is ErrorCategory.PERMISSION_DENIED
    assert classify_error(TimeoutError("invalid response")) is ErrorCategory.VALIDATION_FAILURE


def test_tagged_errors_are_trusted_over_message_text() -> None:
    assert classify_error(StorageFailureError("network share offline")) is ErrorCategory.STORAGE_FAILURE
    assert classify_error(NetworkFailureError("oops")) is ErrorCategory.NETWORK_FAILURE
    assert classify_error(PermissionDeniedError("photo library")) is ErrorCategory.PERMISSION_DENIED
    assert (
        classify_error(RecoveryError("whatever", category=ErrorCategory.TRANSIENT_FAILURE))
        is ErrorCategory.TRANSIENT_FAILURE
    )
    assert classify_error(RecoveryError("invalid")) is ErrorCategory.UNKNOWN


def test_builtin_exception_types_used_when_text_is_silent() -> None:
    assert classify_error(TimeoutError()) is ErrorCategory.NETWORK_FAILURE
    assert classify_error(ConnectionResetError("peer went away")) is ErrorCategory.NETWORK_FAILURE
    assert classify_error(PermissionError("nope")) is ErrorCategory.PERMISSION_DENIED
    assert classify_error(KeyError("recipe_42")) is ErrorCategory.UNKNOWN


def test_retryable_categories() -> None:
    assert not is_retryable_category(ErrorCategory.PERMISSION_DENIED)
    assert not is_retryable_category(ErrorCategory.VALIDATION_FAILURE)
    for category in (
        ErrorCategory.NETWORK_FAILURE,
        ErrorCategory.STORAGE_FAILURE,
        ErrorCategory.TRANSIENT_FAILURE,
        ErrorCategory.UNKNOWN,
    ):
        assert is_retryable_category(category)
