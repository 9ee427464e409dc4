"""Retry and recovery engine for fallible app operations."""

from nomnom.recovery.error_types import (
    ErrorCategory,
    NetworkFailureError,
    OperationKind,
    PermissionDeniedError,
    RecoveryError,
    StorageFailureError,
    TransientFailureError,
    ValidationFailedError,
    classify_error,
    is_retryable_category,
)
from nomnom.recovery.messages import error_message, recovery_suggestions
from nomnom.recovery.orchestrator import OrchestratorState, RetryOrchestrator
from nomnom.recovery.outcome import RecoveryResult
from nomnom.recovery.registry import AttemptRecord, AttemptRegistry
from nomnom.recovery.retry import RetryConfig, compute_delay, run_with_retry
from nomnom.recovery.strategy import RecoveryStrategy, select_strategy

__all__ = [
    "AttemptRecord",
    "AttemptRegistry",
    "ErrorCategory",
    "NetworkFailureError",
    "OperationKind",
    "OrchestratorState",
    "PermissionDeniedError",
    "RecoveryError",
    "RecoveryResult",
    "RecoveryStrategy",
    "RetryConfig",
    "RetryOrchestrator",
    "StorageFailureError",
    "TransientFailureError",
    "ValidationFailedError",
    "classify_error",
    "compute_delay",
    "error_message",
    "is_retryable_category",
    "recovery_suggestions",
    "run_with_retry",
    "select_strategy",
]
