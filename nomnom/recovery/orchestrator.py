"""Retry and recovery orchestration for fallible app operations.

Wraps save/load/delete/upload/download calls with a bounded retry budget,
category-driven strategy selection, backoff and an optional fallback, and
reports a RecoveryResult instead of raising.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

from nomnom.recovery.error_types import ErrorCategory, OperationKind, classify_error
from nomnom.recovery.messages import ABORT_SUGGESTION, error_message, recovery_suggestions
from nomnom.recovery.outcome import RecoveryResult
from nomnom.recovery.registry import AttemptRegistry
from nomnom.recovery.retry import RetryConfig, compute_delay, resolve
from nomnom.recovery.strategy import RecoveryStrategy, select_strategy

T = TypeVar("T")

Operation = Callable[[], Awaitable[T] | T]
Classifier = Callable[[BaseException], ErrorCategory]
Selector = Callable[[ErrorCategory, OperationKind, int, RetryConfig], RecoveryStrategy]

_RETRYING = frozenset(
    {
        RecoveryStrategy.RETRY,
        RecoveryStrategy.RETRY_WITH_DELAY,
        RecoveryStrategy.RETRY_WITH_EXPONENTIAL_BACKOFF,
    }
)


class OrchestratorState(str, Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    AWAITING_BACKOFF = "awaiting_backoff"
    ESCALATING = "escalating"
    TERMINAL = "terminal"


class RetryOrchestrator:
    """
    Execute operations to completion under a retry policy.

    Each ``execute()`` call runs its attempts strictly in sequence. Many calls
    may run concurrently as long as each uses its own operation id. The
    attempt registry entry for an id is always gone once ``execute()``
    returns, raises or is cancelled.
    """

    def __init__(
        self,
        registry: AttemptRegistry | None = None,
        *,
        classify: Classifier = classify_error,
        select: Selector = select_strategy,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        enable_logging: bool = True,
    ):
        self.registry = registry if registry is not None else AttemptRegistry()
        self.enable_logging = enable_logging
        self._classify = classify
        self._select = select
        self._sleep = sleep

    async def execute(
        self,
        operation_id: str,
        operation: Operation[T],
        kind: OperationKind,
        config: RetryConfig = RetryConfig.STANDARD,
        fallback: Operation[T] | None = None,
    ) -> RecoveryResult[T]:
        """
        Run ``operation`` with automatic retry and recovery.

        Args:
            operation_id: Caller-chosen identity, e.g. ``"save_recipe_42"``.
            operation: Zero-argument callable returning a value or awaitable.
            kind: Operation kind, used when the failure category is unknown.
            config: Retry budget and backoff policy.
            fallback: Alternate operation tried once the budget is spent.

        Returns:
            Success with the operation's (or fallback's) value, or a failure
            carrying a user-facing message, suggestions and next strategy.
        """

        if not operation_id:
            raise ValueError("operation_id must be a non-empty string")

        ctx = {"operation_id": operation_id, "kind": kind.value}
        self._transition(ctx, OrchestratorState.IDLE, OrchestratorState.ATTEMPTING)
        try:
            while True:
                count = self.registry.record_attempt(operation_id)
                self._log(
                    ctx, "INFO", "Executing operation: {} (attempt {}/{})",
                    operation_id, count, config.max_attempts,
                )
                try:
                    value = await resolve(operation())
                except Exception as exc:
                    error = exc
                else:
                    self._log(ctx, "INFO", "Operation succeeded: {}", operation_id)
                    return RecoveryResult.ok(value)

                category = self._classify(error)
                strategy = self._select(category, kind, count, config)
                self._log(
                    ctx, "WARNING", "Operation failed: {} - {} (category={}, strategy={})",
                    operation_id, error, category.value, strategy.value,
                )

                if strategy in _RETRYING and count < config.max_attempts:
                    delay = 0.0 if strategy is RecoveryStrategy.RETRY else compute_delay(count, config)
                    if delay > 0:
                        self._transition(ctx, OrchestratorState.ATTEMPTING, OrchestratorState.AWAITING_BACKOFF)
                        self._log(ctx, "WARNING", "Retrying operation {} after {}ms", operation_id, round(delay * 1000))
                        await self._sleep(delay)
                        self._transition(ctx, OrchestratorState.AWAITING_BACKOFF, OrchestratorState.ATTEMPTING)
                    continue

                if strategy in _RETRYING:
                    return await self._exhausted(ctx, error, category, kind, fallback)
                if strategy is RecoveryStrategy.FALLBACK and fallback is not None:
                    return await self._fallback_now(ctx, kind, fallback)
                if strategy is RecoveryStrategy.ABORT:
                    self._log(ctx, "ERROR", "Operation aborted: {} - {}", operation_id, error)
                    return RecoveryResult.failed(error_message(category), [ABORT_SUGGESTION])
                return self._user_intervention(category, kind)
        finally:
            self.registry.clear(operation_id)
            self._transition(ctx, None, OrchestratorState.TERMINAL)

    async def _exhausted(
        self,
        ctx: dict[str, Any],
        error: Exception,
        category: ErrorCategory,
        kind: OperationKind,
        fallback: Operation[T] | None,
    ) -> RecoveryResult[T]:
        """Budget spent: try the fallback, otherwise hand over to the user."""
        if fallback is not None:
            self._transition(ctx, OrchestratorState.ATTEMPTING, OrchestratorState.ESCALATING)
            try:
                value = await resolve(fallback())
            except Exception as fallback_exc:
                self._log(ctx, "ERROR", "Fallback operation failed: {} - {}", ctx["operation_id"], fallback_exc)
            else:
                self._log(ctx, "INFO", "Fallback operation succeeded: {}", ctx["operation_id"])
                return RecoveryResult.ok(value)

        self._log(ctx, "ERROR", "All attempts failed: {} - {}", ctx["operation_id"], error)
        return self._user_intervention(category, kind)

    async def _fallback_now(
        self,
        ctx: dict[str, Any],
        kind: OperationKind,
        fallback: Operation[T],
    ) -> RecoveryResult[T]:
        """Skip remaining primary retries and run the fallback directly."""
        self._transition(ctx, OrchestratorState.ATTEMPTING, OrchestratorState.ESCALATING)
        try:
            value = await resolve(fallback())
        except Exception as fallback_exc:
            self._log(ctx, "ERROR", "Fallback operation failed: {} - {}", ctx["operation_id"], fallback_exc)
            return self._user_intervention(self._classify(fallback_exc), kind)
        self._log(ctx, "INFO", "Fallback operation succeeded: {}", ctx["operation_id"])
        return RecoveryResult.ok(value)

    @staticmethod
    def _user_intervention(
        category: ErrorCategory,
        kind: OperationKind,
    ) -> RecoveryResult[Any]:
        return RecoveryResult.failed(
            error_message(category),
            recovery_suggestions(category, kind),
            RecoveryStrategy.USER_INTERVENTION,
        )

    def _transition(
        self,
        ctx: dict[str, Any],
        source: OrchestratorState | None,
        target: OrchestratorState,
    ) -> None:
        self._log(ctx, "DEBUG", "State {} -> {}", source.value if source else "*", target.value)

    def _log(self, ctx: dict[str, Any], level: str, message: str, *args: Any) -> None:
        if self.enable_logging:
            logger.bind(**ctx).log(level, message, *args)

    def attempt_count(self, operation_id: str) -> int:
        return self.registry.attempt_count(operation_id)

    def is_retrying(self, operation_id: str) -> bool:
        return self.registry.is_retrying(operation_id)

    def reset_operation(self, operation_id: str) -> None:
        self.registry.clear(operation_id)

    def clear_all(self) -> None:
        self.registry.clear_all()
