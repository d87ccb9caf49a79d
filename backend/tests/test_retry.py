"""Tests for the backoff executor."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from services.retry import BackoffExecutor, ErrorKind, classify_error, retry_with_backoff
from shared.exceptions import InvalidCredentialError


class QuotaError(Exception):
    pass


def _executor(sleep, max_retries=5, on_invalid_key=None):
    return BackoffExecutor(
        max_retries=max_retries,
        base_delay=1.0,
        on_invalid_key=on_invalid_key,
        sleep=sleep,
        jitter=lambda: 0.0,
    )


@pytest.mark.parametrize(
    "message, expected",
    [
        ("429 Too Many Requests", ErrorKind.QUOTA_EXCEEDED),
        ("RESOURCE_EXHAUSTED: try later", ErrorKind.QUOTA_EXCEEDED),
        ("Quota exceeded for project", ErrorKind.QUOTA_EXCEEDED),
        ("404 Requested entity was not found.", ErrorKind.INVALID_CREDENTIAL),
        ("500 internal error", ErrorKind.OTHER),
    ],
)
def test_classify_error(message: str, expected: ErrorKind) -> None:
    assert classify_error(Exception(message)) is expected


def test_invalid_credential_wins_over_quota_markers() -> None:
    error = Exception("429: Requested entity was not found")
    assert classify_error(error) is ErrorKind.INVALID_CREDENTIAL


@pytest.mark.asyncio
async def test_returns_first_success_without_sleeping(no_sleep) -> None:
    operation = AsyncMock(return_value="ok")

    result = await _executor(no_sleep).run(operation)

    assert result == "ok"
    assert operation.await_count == 1
    assert no_sleep.delays == []


@pytest.mark.asyncio
async def test_quota_error_on_second_attempt_is_retried(no_sleep) -> None:
    operation = AsyncMock(side_effect=[QuotaError("RESOURCE_EXHAUSTED"), "done"])

    result = await _executor(no_sleep, max_retries=5).run(operation)

    assert result == "done"
    assert operation.await_count == 2
    assert no_sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_quota_error_on_last_attempt_surfaces(no_sleep) -> None:
    operation = AsyncMock(side_effect=QuotaError("RESOURCE_EXHAUSTED"))

    with pytest.raises(QuotaError):
        await _executor(no_sleep, max_retries=5).run(operation)

    assert operation.await_count == 5
    assert len(no_sleep.delays) == 4


@pytest.mark.asyncio
async def test_delays_grow_exponentially(no_sleep) -> None:
    operation = AsyncMock(side_effect=QuotaError("429"))

    with pytest.raises(QuotaError):
        await _executor(no_sleep, max_retries=4).run(operation)

    assert no_sleep.delays == [1.0, 2.0, 4.0]
    assert all(a < b for a, b in zip(no_sleep.delays, no_sleep.delays[1:]))


def test_jitter_is_bounded() -> None:
    executor = BackoffExecutor(base_delay=1.0)
    for attempt in range(4):
        delay = executor.delay_for(attempt)
        assert 2 ** attempt <= delay <= 2 ** attempt + 0.5


@pytest.mark.asyncio
async def test_other_errors_are_not_retried(no_sleep) -> None:
    operation = AsyncMock(side_effect=ValueError("bad request"))

    with pytest.raises(ValueError):
        await _executor(no_sleep).run(operation)

    assert operation.await_count == 1
    assert no_sleep.delays == []


@pytest.mark.asyncio
async def test_invalid_key_calls_callback_once_and_stops(no_sleep) -> None:
    callback = MagicMock()
    operation = AsyncMock(side_effect=Exception("Requested entity was not found."))

    with pytest.raises(InvalidCredentialError) as exc_info:
        await _executor(no_sleep, on_invalid_key=callback).run(operation)

    callback.assert_called_once_with()
    assert operation.await_count == 1
    assert no_sleep.delays == []
    assert "requested entity was not found" in str(exc_info.value.__cause__).lower()


def test_rejects_non_positive_attempts() -> None:
    with pytest.raises(ValueError):
        BackoffExecutor(max_retries=0)


@pytest.mark.asyncio
async def test_retry_with_backoff_uses_default_policy() -> None:
    operation = AsyncMock(return_value=42)
    assert await retry_with_backoff(operation) == 42
