"""Recovery strategy selection."""

from __future__ import annotations

from enum import Enum

from nomnom.recovery.error_types import ErrorCategory, OperationKind, is_retryable_category
from nomnom.recovery.retry import RetryConfig


class RecoveryStrategy(str, Enum):
    """What the orchestrator does after a failed attempt."""

    RETRY = "retry"
    RETRY_WITH_DELAY = "retry_with_delay"
    RETRY_WITH_EXPONENTIAL_BACKOFF = "retry_with_exponential_backoff"
    FALLBACK = "fallback"
    USER_INTERVENTION = "user_intervention"
    ABORT = "abort"


# (under budget, budget exhausted)
_CATEGORY_RULES: dict[ErrorCategory, tuple[RecoveryStrategy, RecoveryStrategy]] = {
    ErrorCategory.NETWORK_FAILURE: (
        RecoveryStrategy.RETRY_WITH_EXPONENTIAL_BACKOFF,
        RecoveryStrategy.USER_INTERVENTION,
    ),
    ErrorCategory.STORAGE_FAILURE: (RecoveryStrategy.RETRY_WITH_DELAY, RecoveryStrategy.FALLBACK),
    # Degrade to one delayed attempt before giving up.
    ErrorCategory.TRANSIENT_FAILURE: (RecoveryStrategy.RETRY, RecoveryStrategy.RETRY_WITH_DELAY),
}

_UNKNOWN_BY_KIND: dict[OperationKind, tuple[RecoveryStrategy, RecoveryStrategy]] = {
    OperationKind.SAVE: (RecoveryStrategy.RETRY_WITH_DELAY, RecoveryStrategy.FALLBACK),
    OperationKind.UPLOAD: (RecoveryStrategy.RETRY_WITH_DELAY, RecoveryStrategy.FALLBACK),
    OperationKind.LOAD: (RecoveryStrategy.RETRY_WITH_EXPONENTIAL_BACKOFF, RecoveryStrategy.FALLBACK),
    OperationKind.DOWNLOAD: (RecoveryStrategy.RETRY_WITH_EXPONENTIAL_BACKOFF, RecoveryStrategy.FALLBACK),
    OperationKind.DELETE: (RecoveryStrategy.RETRY, RecoveryStrategy.USER_INTERVENTION),
}


def select_strategy(
    category: ErrorCategory,
    kind: OperationKind,
    attempt_count: int,
    config: RetryConfig,
) -> RecoveryStrategy:
    """
    Decide how to proceed after ``attempt_count`` failed attempts.

    Validation operations and permission/validation failures always go
    straight to the user. Everything else retries while under budget and
    picks an escalation once ``config.max_attempts`` is reached.
    """

    if kind is OperationKind.VALIDATION:
        return RecoveryStrategy.USER_INTERVENTION
    if not is_retryable_category(category):
        return RecoveryStrategy.USER_INTERVENTION

    rule = _CATEGORY_RULES.get(category) or _UNKNOWN_BY_KIND[kind]
    under_budget, exhausted = rule
    return under_budget if attempt_count < config.max_attempts else exhausted
