"""Structured result of a recovered operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from nomnom.recovery.strategy import RecoveryStrategy

T = TypeVar("T")


@dataclass(frozen=True)
class RecoveryResult(Generic[T]):
    """Outcome of ``RetryOrchestrator.execute`` for the caller to render."""

    success: bool
    data: T | None = None
    error: str | None = None
    suggestions: list[str] = field(default_factory=list)
    next_strategy: RecoveryStrategy | None = None

    @staticmethod
    def ok(data: T) -> "RecoveryResult[T]":
        return RecoveryResult(success=True, data=data)

    @staticmethod
    def failed(
        error: str,
        suggestions: list[str] | None = None,
        next_strategy: RecoveryStrategy | None = None,
    ) -> "RecoveryResult[T]":
        return RecoveryResult(
            success=False,
            error=error,
            suggestions=list(suggestions or []),
            next_strategy=next_strategy,
        )

    def needs_user_action(self) -> bool:
        """Return True if the caller should offer a manual retry."""
        return not self.success and self.next_strategy is RecoveryStrategy.USER_INTERVENTION
