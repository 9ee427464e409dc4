import pytest

from nomnom.recovery.error_types import TransientFailureError, ValidationFailedError
from nomnom.recovery.retry import RetryConfig, compute_delay, run_with_retry


def test_presets_match_documented_values() -> None:
    assert RetryConfig.QUICK == RetryConfig(max_attempts=2, initial_delay_ms=500, max_delay_ms=5_000)
    assert RetryConfig.STANDARD == RetryConfig(max_attempts=3, initial_delay_ms=1_000, max_delay_ms=15_000)
    assert RetryConfig.PERSISTENT == RetryConfig(max_attempts=5, initial_delay_ms=2_000, max_delay_ms=60_000)
    for preset in (RetryConfig.QUICK, RetryConfig.STANDARD, RetryConfig.PERSISTENT):
        assert preset.backoff_multiplier == 2.0
        assert preset.exponential_backoff is True


def test_preset_lookup_by_name() -> None:
    assert RetryConfig.preset("Quick") is RetryConfig.QUICK
    assert RetryConfig.preset("persistent") is RetryConfig.PERSISTENT
    with pytest.raises(ValueError):
        RetryConfig.preset("aggressive")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_attempts": 0},
        {"initial_delay_ms": -1},
        {"initial_delay_ms": 5_000, "max_delay_ms": 1_000},
        {"backoff_multiplier": 0.5},
    ],
)
def test_invalid_config_is_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        RetryConfig(**kwargs)


def test_exponential_delay_grows_from_initial_delay() -> None:
    config = RetryConfig.STANDARD
    assert [compute_delay(n, config) for n in range(1, 6)] == [1.0, 2.0, 4.0, 8.0, 15.0]


def test_linear_mode_returns_initial_delay() -> None:
    config = RetryConfig(initial_delay_ms=750, exponential_backoff=False)
    assert compute_delay(1, config) == 0.75
    assert compute_delay(7, config) == 0.75


def test_delay_rounds_to_whole_milliseconds() -> None:
    config = RetryConfig(initial_delay_ms=333, max_delay_ms=10_000, backoff_multiplier=1.5)
    assert compute_delay(2, config) == 0.5


def test_delay_never_exceeds_max_delay() -> None:
    configs = [
        RetryConfig.QUICK,
        RetryConfig.STANDARD,
        RetryConfig.PERSISTENT,
        RetryConfig(initial_delay_ms=0, max_delay_ms=0),
        RetryConfig(initial_delay_ms=100, max_delay_ms=100, backoff_multiplier=10.0),
        RetryConfig(initial_delay_ms=400, max_delay_ms=900, exponential_backoff=False),
    ]
    for config in configs:
        for attempt in range(1, 60):
            assert compute_delay(attempt, config) <= config.max_delay_ms / 1000.0


@pytest.mark.asyncio
async def test_run_with_retry_retries_then_succeeds() -> None:
    attempts = 0
    delays: list[float] = []

    async def operation() -> str:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise TransientFailureError("database is locked")
        return "ok"

    async def fake_sleep(delay: float) -> None:
        delays.append(delay)

    result = await run_with_retry(operation, max_attempts=4, delay_seconds=0.25, sleep=fake_sleep)

    assert result == "ok"
    assert attempts == 3
    assert delays == [0.25, 0.25]


@pytest.mark.asyncio
async def test_run_with_retry_reraises_after_last_attempt() -> None:
    attempts = 0
    retried: list[int] = []

    def operation() -> None:
        nonlocal attempts
        attempts += 1
        raise TransientFailureError("busy")

    async def fake_sleep(delay: float) -> None:
        return None

    with pytest.raises(TransientFailureError):
        await run_with_retry(
            operation,
            max_attempts=2,
            on_retry=lambda attempt, exc, delay: retried.append(attempt),
            sleep=fake_sleep,
        )

    assert attempts == 2
    assert retried == [1]


@pytest.mark.asyncio
async def test_run_with_retry_honors_retry_if() -> None:
    attempts = 0

    async def operation() -> None:
        nonlocal attempts
        attempts += 1
        raise ValidationFailedError("title required")

    with pytest.raises(ValidationFailedError):
        await run_with_retry(
            operation,
            max_attempts=5,
            retry_if=lambda exc: not isinstance(exc, ValidationFailedError),
        )

    assert attempts == 1
