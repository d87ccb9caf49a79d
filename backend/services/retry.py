"""Bounded exponential-backoff retry for calls to the generative service."""

from __future__ import annotations

import asyncio
import random
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from shared.exceptions import InvalidCredentialError
from shared.logging_utils import setup_logging

logger = setup_logging("retry")

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 6
DEFAULT_BASE_DELAY = 1.0
MAX_JITTER = 0.5

INVALID_CREDENTIAL_MARKERS = ("requested entity was not found",)
QUOTA_MARKERS = ("429", "resource_exhausted", "quota")


class ErrorKind(str, Enum):
    """How a failed attempt is treated."""

    INVALID_CREDENTIAL = "invalid_credential"
    QUOTA_EXCEEDED = "quota_exceeded"
    OTHER = "other"


def classify_error(error: BaseException) -> ErrorKind:
    """Classify an error by the text the service put in it."""
    message = (str(error) or repr(error)).lower()
    if any(marker in message for marker in INVALID_CREDENTIAL_MARKERS):
        return ErrorKind.INVALID_CREDENTIAL
    if any(marker in message for marker in QUOTA_MARKERS):
        return ErrorKind.QUOTA_EXCEEDED
    return ErrorKind.OTHER


def _default_jitter() -> float:
    return random.random() * MAX_JITTER


class BackoffExecutor:
    """Run an async operation, retrying quota errors with exponential backoff."""

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        on_invalid_key: Callable[[], Any] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        jitter: Callable[[], float] = _default_jitter,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.on_invalid_key = on_invalid_key
        self._sleep = sleep
        self._jitter = jitter

    def delay_for(self, attempt: int) -> float:
        """Backoff before retrying after zero-based ``attempt`` failed."""
        return self.base_delay * (2 ** attempt) + self._jitter()

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        last_error: BaseException | None = None
        for attempt in range(self.max_retries):
            try:
                return await operation()
            except Exception as exc:
                last_error = exc
                kind = classify_error(exc)

                if kind is ErrorKind.INVALID_CREDENTIAL:
                    logger.error(f"API key rejected by the service: {exc}")
                    if self.on_invalid_key is not None:
                        self.on_invalid_key()
                    raise InvalidCredentialError(
                        "The selected API key is not valid. Please select a key again."
                    ) from exc

                if kind is ErrorKind.QUOTA_EXCEEDED and attempt < self.max_retries - 1:
                    delay = self.delay_for(attempt)
                    logger.warning(
                        f"Rate limited (attempt {attempt + 1}/{self.max_retries}); "
                        f"retrying in {delay:.2f}s"
                    )
                    await self._sleep(delay)
                    continue

                raise

        raise last_error  # type: ignore[misc]


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    on_invalid_key: Callable[[], Any] | None = None,
) -> T:
    """Execute ``operation`` with the default backoff policy."""
    executor = BackoffExecutor(max_retries, base_delay, on_invalid_key)
    return await executor.run(operation)
