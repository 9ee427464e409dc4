"""Retry policy, backoff calculation and a plain async retry helper."""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, ClassVar, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Retry budget and backoff behaviour for one wrapped operation."""

    max_attempts: int = 3
    initial_delay_ms: int = 1_000
    max_delay_ms: int = 30_000
    backoff_multiplier: float = 2.0
    exponential_backoff: bool = True

    QUICK: ClassVar["RetryConfig"]
    STANDARD: ClassVar["RetryConfig"]
    PERSISTENT: ClassVar["RetryConfig"]

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.initial_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("retry delays must not be negative")
        if self.max_delay_ms < self.initial_delay_ms:
            raise ValueError(
                f"max_delay_ms ({self.max_delay_ms}) is smaller than "
                f"initial_delay_ms ({self.initial_delay_ms})"
            )
        if self.backoff_multiplier < 1.0:
            raise ValueError(f"backoff_multiplier must be >= 1.0, got {self.backoff_multiplier}")

    @classmethod
    def preset(cls, name: str) -> "RetryConfig":
        """Look up a named preset: quick, standard or persistent."""
        presets = {
            "quick": cls.QUICK,
            "standard": cls.STANDARD,
            "persistent": cls.PERSISTENT,
        }
        key = (name or "").strip().lower()
        if key not in presets:
            raise ValueError(f"Unknown retry preset '{name}' (expected one of {sorted(presets)})")
        return presets[key]

    def compute_delay_seconds(self, attempt: int) -> float:
        """
        Compute sleep delay before the attempt after ``attempt``.

        Args:
            attempt: Attempt that just failed (1-based).

        Returns:
            Delay in seconds, rounded to whole milliseconds and never above
            ``max_delay_ms``.
        """

        if not self.exponential_backoff:
            return self.initial_delay_ms / 1000.0

        capped_attempt = max(1, attempt)
        raw_delay_ms = self.initial_delay_ms * (self.backoff_multiplier ** (capped_attempt - 1))
        delay_ms = min(float(self.max_delay_ms), raw_delay_ms)
        return round(delay_ms) / 1000.0


RetryConfig.QUICK = RetryConfig(max_attempts=2, initial_delay_ms=500, max_delay_ms=5_000)
RetryConfig.STANDARD = RetryConfig(max_attempts=3, initial_delay_ms=1_000, max_delay_ms=15_000)
RetryConfig.PERSISTENT = RetryConfig(max_attempts=5, initial_delay_ms=2_000, max_delay_ms=60_000)


def compute_delay(attempt: int, config: RetryConfig) -> float:
    """Backoff delay in seconds before retrying after ``attempt``."""
    return config.compute_delay_seconds(attempt)


async def resolve(value: T | Awaitable[T]) -> T:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


RetryCallback = Callable[[int, Exception, float], Awaitable[None] | None]


async def run_with_retry(
    operation: Callable[[], Awaitable[T] | T],
    *,
    max_attempts: int = 3,
    delay_seconds: float = 1.0,
    retry_if: Callable[[Exception], bool] | None = None,
    on_retry: RetryCallback | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run an operation with a fixed-delay retry.

    The last error is re-raised once attempts run out or ``retry_if``
    rejects it. No attempt bookkeeping is kept between calls.
    """

    limit = max(1, max_attempts)
    attempt = 1

    while True:
        try:
            return await resolve(operation())
        except Exception as exc:
            if attempt >= limit or (retry_if is not None and not retry_if(exc)):
                raise

            if on_retry:
                await resolve(on_retry(attempt, exc, delay_seconds))
            if delay_seconds > 0:
                await sleep(delay_seconds)
            attempt += 1
