"""
Retry policies and the async retry loop used by the client.

A policy answers one question: given the failure of attempt N, how long to wait
before attempt N+1, or `None` to give up. Policies are immutable and built by
composition:

    policy = (
        ExponentialBackoffRetryPolicy(base_delay=0.01)
        .with_max_attempts(10)
        .with_max_total_delay(15.0)
        .with_max_jitter(0.01)
        .skip_retry_on_error(lambda e: not is_retryable(e))
    )

    response = await retry(lambda: send_once(), policy)

Notes
-----
- Delays are in seconds.
- `retry()` runs attempts strictly one after another and sleeps with
  `asyncio.sleep`, so a cancelled caller aborts a pending delay immediately.
- Only `Exception` subclasses are handled; `asyncio.CancelledError` and other
  `BaseException`s always propagate.
- `give_up_on` exception types are re-raised without asking the policy.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from ..config import ClientConfig
from ..errors import is_retryable

__all__ = [
    "RetryContext",
    "RetryPolicy",
    "ExponentialBackoffRetryPolicy",
    "MaxAttemptsRetryPolicy",
    "MaxTotalDelayRetryPolicy",
    "JitteredRetryPolicy",
    "FilteredRetryPolicy",
    "default_retry_policy",
    "retry",
]

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryContext:
    """What a policy sees after a failed attempt."""

    attempts_made: int
    accumulated_delay: float
    error: BaseException


class RetryPolicy:
    """Base class: subclasses implement `next_delay`; combinators wrap `self`."""

    __slots__ = ()

    def next_delay(self, context: RetryContext) -> Optional[float]:  # pragma: no cover - abstract
        raise NotImplementedError

    def with_max_attempts(self, max_attempts: int) -> "MaxAttemptsRetryPolicy":
        """Give up once `max_attempts` attempts (the first one included) have failed."""
        return MaxAttemptsRetryPolicy(self, max_attempts)

    def with_max_total_delay(self, max_total_delay: float) -> "MaxTotalDelayRetryPolicy":
        """Give up when the next delay would push the summed delays past the limit."""
        return MaxTotalDelayRetryPolicy(self, max_total_delay)

    def with_max_jitter(self, max_jitter: float) -> "JitteredRetryPolicy":
        """Add U(0, max_jitter) to every delay."""
        return JitteredRetryPolicy(self, max_jitter)

    def skip_retry_on_error(self, predicate: Callable[[BaseException], bool]) -> "FilteredRetryPolicy":
        """Give up immediately on errors for which `predicate` returns True."""
        return FilteredRetryPolicy(self, predicate)


class ExponentialBackoffRetryPolicy(RetryPolicy):
    """`base_delay * 2**(attempts_made - 1)`, retrying forever unless wrapped."""

    __slots__ = ("base_delay",)

    def __init__(self, base_delay: float) -> None:
        if base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        self.base_delay = float(base_delay)

    def next_delay(self, context: RetryContext) -> Optional[float]:
        return self.base_delay * (2 ** max(context.attempts_made - 1, 0))


class MaxAttemptsRetryPolicy(RetryPolicy):
    __slots__ = ("inner", "max_attempts")

    def __init__(self, inner: RetryPolicy, max_attempts: int) -> None:
        self.inner = inner
        self.max_attempts = int(max_attempts)

    def next_delay(self, context: RetryContext) -> Optional[float]:
        if context.attempts_made >= self.max_attempts:
            return None
        return self.inner.next_delay(context)


class MaxTotalDelayRetryPolicy(RetryPolicy):
    __slots__ = ("inner", "max_total_delay")

    def __init__(self, inner: RetryPolicy, max_total_delay: float) -> None:
        self.inner = inner
        self.max_total_delay = float(max_total_delay)

    def next_delay(self, context: RetryContext) -> Optional[float]:
        delay = self.inner.next_delay(context)
        if delay is None or context.accumulated_delay + delay > self.max_total_delay:
            return None
        return delay


class JitteredRetryPolicy(RetryPolicy):
    __slots__ = ("inner", "max_jitter")

    def __init__(self, inner: RetryPolicy, max_jitter: float) -> None:
        self.inner = inner
        self.max_jitter = float(max_jitter)

    def next_delay(self, context: RetryContext) -> Optional[float]:
        delay = self.inner.next_delay(context)
        if delay is None:
            return None
        return delay + random.uniform(0.0, self.max_jitter)


class FilteredRetryPolicy(RetryPolicy):
    __slots__ = ("inner", "predicate")

    def __init__(self, inner: RetryPolicy, predicate: Callable[[BaseException], bool]) -> None:
        self.inner = inner
        self.predicate = predicate

    def next_delay(self, context: RetryContext) -> Optional[float]:
        if self.predicate(context.error):
            return None
        return self.inner.next_delay(context)


def default_retry_policy(config: Optional[ClientConfig] = None) -> RetryPolicy:
    """Exponential backoff tuned by `config`, retrying only transient errors."""
    cfg = config or ClientConfig()
    return (
        ExponentialBackoffRetryPolicy(cfg.retry_base_delay)
        .with_max_attempts(cfg.max_attempts)
        .with_max_total_delay(cfg.max_total_delay)
        .with_max_jitter(cfg.max_jitter)
        .skip_retry_on_error(lambda e: not is_retryable(e))
    )


async def retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    give_up_on: Tuple[Type[BaseException], ...] = (),
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
) -> T:
    """
    Await `operation()` until it succeeds or `policy` gives up.

    On give-up the last error is re-raised unchanged. `on_retry` receives
    (attempts_made, error, delay) before each sleep.
    """
    attempts_made = 0
    accumulated_delay = 0.0
    while True:
        try:
            return await operation()
        except give_up_on:
            raise
        except Exception as exc:
            attempts_made += 1
            delay = policy.next_delay(
                RetryContext(attempts_made=attempts_made, accumulated_delay=accumulated_delay, error=exc)
            )
            if delay is None:
                raise
            if on_retry is not None:
                on_retry(attempts_made, exc, delay)
            else:
                log.debug("attempt %d failed (%s); retrying in %.3fs", attempts_made, exc, delay)
            await asyncio.sleep(delay)
            accumulated_delay += delay
