"""Bounded retries with per-attempt timeouts and exponential backoff."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from amora.errors import AmoraError, DeadlineExceeded, ProviderError, ProviderTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], float]


class Deadline:
    """An overall time ceiling shared by every attempt of one request."""

    def __init__(self, seconds: float, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0


def backoff_delay_ms(attempt: int, base_delay_ms: int) -> int:
    """Delay before *attempt* (0-indexed). The first attempt is immediate."""
    if attempt <= 0:
        return 0
    return base_delay_ms * 2**attempt


class RetryableCall:
    """Run an async operation with retries, a timeout and backoff.

    Errors are never swallowed: once every attempt has failed, the last
    error is raised to the caller, who decides whether to fall back.
    """

    def __init__(self, *, sleep: Sleep = asyncio.sleep) -> None:
        self._sleep = sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        timeout_ms: int = 15_000,
        deadline: Deadline | None = None,
        label: str = "operation",
    ) -> T:
        """Invoke *operation* up to ``max_retries + 1`` times.

        Parameters
        ----------
        operation:
            Zero-argument factory returning a fresh awaitable per attempt.
        max_retries:
            Additional attempts after the first; 0 means exactly one attempt.
        base_delay_ms:
            Backoff base; attempt *k* waits ``base_delay_ms * 2**k`` first.
        timeout_ms:
            Per-attempt ceiling; exceeding it raises ``ProviderTimeout``.
        deadline:
            Optional overall ceiling. Attempts and backoff never run past it;
            ``DeadlineExceeded`` is raised instead.
        """
        last_error: Exception | None = None

        for attempt in range(max(0, max_retries) + 1):
            delay_s = backoff_delay_ms(attempt, base_delay_ms) / 1000
            if delay_s:
                if deadline is not None and delay_s >= deadline.remaining():
                    raise DeadlineExceeded(label) from last_error
                logger.debug("%s: backing off %.1fs before attempt %d", label, delay_s, attempt + 1)
                await self._sleep(delay_s)

            timeout_s = timeout_ms / 1000
            if deadline is not None:
                if deadline.expired:
                    raise DeadlineExceeded(label) from last_error
                timeout_s = min(timeout_s, deadline.remaining())

            try:
                return await asyncio.wait_for(operation(), timeout=timeout_s)
            except Exception as exc:
                if isinstance(exc, TimeoutError) and not isinstance(exc, AmoraError):
                    exc = ProviderTimeout(label, timeout_s * 1000)
                last_error = exc
                logger.debug("%s: attempt %d failed: %s", label, attempt + 1, exc)

        if last_error is None:
            raise ProviderError(label, "no attempt was made")
        raise last_error
