"""Shared fakes for the client tests: a scripted in-memory transport and fast retry policies."""

from __future__ import annotations

from typing import Iterable, List, Union

import pytest

from vss_client.errors import is_retryable
from vss_client.transport import HttpRequest, HttpResponse
from vss_client.utils.retry import ExponentialBackoffRetryPolicy, RetryPolicy

Scripted = Union[HttpResponse, BaseException]


class FakeTransport:
    """
    Replays scripted outcomes in order; the last one repeats once the script is
    exhausted. Every request is recorded for inspection.
    """

    def __init__(self, outcomes: Iterable[Scripted]) -> None:
        self._outcomes: List[Scripted] = list(outcomes)
        if not self._outcomes:
            raise ValueError("FakeTransport needs at least one outcome")
        self.requests: List[HttpRequest] = []
        self.closed = False

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def make_transport():
    def _make(*outcomes: Scripted) -> FakeTransport:
        return FakeTransport(outcomes)

    return _make


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """No sleeping, five attempts, transient errors only."""
    return (
        ExponentialBackoffRetryPolicy(0.0)
        .with_max_attempts(5)
        .skip_retry_on_error(lambda e: not is_retryable(e))
    )


@pytest.fixture
def retry_everything_policy() -> RetryPolicy:
    """No sleeping, five attempts, no error classification at all."""
    return ExponentialBackoffRetryPolicy(0.0).with_max_attempts(5)


@pytest.fixture
def secret_key() -> bytes:
    # Deterministic test secret: 0x01, 0x02, ..., 0x20
    return bytes(range(1, 33))
