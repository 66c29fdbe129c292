"""Bounded retry with exponential backoff."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog

logger = structlog.get_logger(__name__)

R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 3
    delay_ms: int = 500
    backoff_factor: float = 2.0

    def wait_seconds(self, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (1-based)."""
        return (self.delay_ms * (self.backoff_factor ** (attempt - 1))) / 1000


NO_RETRY = RetryPolicy(max_attempts=1)


async def call_with_retry(
    func: Callable[[], Awaitable[R]],
    policy: RetryPolicy,
    should_retry: Callable[[Exception], bool],
    label: str = "",
) -> R:
    """Await ``func`` until it succeeds, the error is not retryable, or attempts run out."""
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await func()
        except Exception as e:
            if attempt >= policy.max_attempts or not should_retry(e):
                raise
            wait = policy.wait_seconds(attempt)
            logger.debug(
                "retry_attempt",
                label=label,
                attempt=attempt,
                max_attempts=policy.max_attempts,
                wait_seconds=wait,
                error=str(e),
            )
            await asyncio.sleep(wait)
    msg = "RetryPolicy.max_attempts must be at least 1"
    raise ValueError(msg)
