"""Unit tests for the bounded retry helper."""

from __future__ import annotations

import pytest

from opsmgmt.utils.retry import NO_RETRY, RetryPolicy, call_with_retry


class _Flaky:
    def __init__(self, failures: int, exc: Exception) -> None:
        self.failures = failures
        self.exc = exc
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return "ok"


@pytest.mark.unit
class TestRetryPolicy:
    def test_wait_grows_by_backoff_factor(self) -> None:
        policy = RetryPolicy(max_attempts=4, delay_ms=100, backoff_factor=2.0)
        assert policy.wait_seconds(1) == pytest.approx(0.1)
        assert policy.wait_seconds(2) == pytest.approx(0.2)
        assert policy.wait_seconds(3) == pytest.approx(0.4)


@pytest.mark.unit
class TestCallWithRetry:
    @pytest.mark.asyncio
    async def test_succeeds_after_transient_failures(self) -> None:
        func = _Flaky(2, ConnectionError("down"))
        result = await call_with_retry(func, RetryPolicy(delay_ms=0), lambda e: True)
        assert result == "ok"
        assert func.calls == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self) -> None:
        func = _Flaky(5, ConnectionError("down"))
        with pytest.raises(ConnectionError):
            await call_with_retry(func, RetryPolicy(max_attempts=3, delay_ms=0), lambda e: True)
        assert func.calls == 3

    @pytest.mark.asyncio
    async def test_non_retryable_error_raises_immediately(self) -> None:
        func = _Flaky(1, KeyError("nope"))
        with pytest.raises(KeyError):
            await call_with_retry(
                func, RetryPolicy(delay_ms=0), lambda e: isinstance(e, ConnectionError)
            )
        assert func.calls == 1

    @pytest.mark.asyncio
    async def test_no_retry_policy_makes_one_attempt(self) -> None:
        func = _Flaky(1, ConnectionError("down"))
        with pytest.raises(ConnectionError):
            await call_with_retry(func, NO_RETRY, lambda e: True)
        assert func.calls == 1
