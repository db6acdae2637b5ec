"""Unit tests for the readiness prober.

A fake clock advanced by the fake sleep keeps the timing assertions exact;
one test uses the real clock to check the wall-time budget.
"""

from __future__ import annotations

import time
from typing import List

import httpx
import pytest

from odcs_harness.core.errors import ProbeFatalError, ReadinessTimeoutError
from odcs_harness.readiness import (
    FatalProbeResponse,
    Ready,
    ReadinessProber,
    TimedOut,
    http_probe,
    is_retriable,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class CountingProbe:
    """Fails with ``error`` (or returns False) until attempt ``succeed_on``."""

    def __init__(self, succeed_on: int = 0, error: Exception = None) -> None:
        self.succeed_on = succeed_on
        self.error = error
        self.calls = 0

    def __call__(self) -> bool:
        self.calls += 1
        if self.succeed_on and self.calls >= self.succeed_on:
            return True
        if self.error is not None:
            raise self.error
        return False


def _identity(result: bool) -> bool:
    return result


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def prober(clock: FakeClock) -> ReadinessProber:
    return ReadinessProber(sleep=clock.sleep, clock=clock)


class TestSuccessPath:
    """Test probes that eventually succeed."""

    def test_immediate_success_does_not_sleep(self, prober, clock):
        probe = CountingProbe(succeed_on=1)

        result = prober.poll(probe, _identity, max_attempts=15, interval=0.1)

        assert result == Ready(attempts=1, elapsed=0.0)
        assert probe.calls == 1
        assert clock.sleeps == []

    @pytest.mark.parametrize("k", [2, 5, 15])
    def test_ready_after_exactly_k_attempts(self, prober, clock, k):
        probe = CountingProbe(succeed_on=k, error=httpx.ConnectError("connection refused"))

        result = prober.poll(probe, _identity, max_attempts=15, interval=0.1)

        assert isinstance(result, Ready)
        assert result.attempts == k
        assert probe.calls == k
        assert clock.sleeps == [0.1] * (k - 1)

    def test_non_matching_result_is_retried(self, prober):
        probe = CountingProbe(succeed_on=3)

        result = prober.poll(probe, _identity, max_attempts=5, interval=0.0)

        assert isinstance(result, Ready)
        assert result.attempts == 3


class TestTimeoutPath:
    """Test probes that never succeed."""

    def test_times_out_after_exactly_max_attempts(self, prober, clock):
        probe = CountingProbe(error=httpx.ConnectError("connection refused"))

        result = prober.poll(probe, _identity, max_attempts=15, interval=0.1)

        assert isinstance(result, TimedOut)
        assert result.attempts == 15
        assert probe.calls == 15
        assert result.elapsed == pytest.approx(1.5)

    def test_wall_time_matches_attempt_budget(self):
        probe = CountingProbe()

        result = ReadinessProber().poll(probe, _identity, max_attempts=15, interval=0.1)

        assert isinstance(result, TimedOut)
        assert probe.calls == 15
        assert 1.4 <= result.elapsed < 3.0

    def test_raise_error(self):
        with pytest.raises(ReadinessTimeoutError) as exc_info:
            TimedOut(attempts=15, elapsed=1.5).raise_error("Server")

        assert exc_info.value.attempts == 15

    def test_invalid_max_attempts(self, prober):
        with pytest.raises(ValueError):
            prober.poll(CountingProbe(), _identity, max_attempts=0, interval=0.1)


class TestFailureClassification:
    """Test retriable vs fatal failures."""

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
            httpx.RemoteProtocolError("closed"),
            ConnectionRefusedError(),
            OSError("reset"),
        ],
    )
    def test_retriable_errors(self, error):
        assert is_retriable(error)

    @pytest.mark.parametrize(
        "error",
        [
            httpx.UnsupportedProtocol("ftp"),
            httpx.LocalProtocolError("bad header"),
            ValueError("bug"),
        ],
    )
    def test_fatal_errors(self, error):
        assert not is_retriable(error)

    def test_fatal_error_stops_polling(self, prober, clock):
        cause = httpx.UnsupportedProtocol("Request URL has an unsupported protocol 'ftp://'")
        probe = CountingProbe(error=cause)

        with pytest.raises(ProbeFatalError) as exc_info:
            prober.poll(probe, _identity, max_attempts=15, interval=0.1)

        assert probe.calls == 1
        assert clock.sleeps == []
        assert exc_info.value.attempts == 1
        assert exc_info.value.__cause__ is cause

    def test_fatal_after_retriable(self, prober):
        errors = iter([httpx.ConnectError("refused"), ValueError("bug")])

        def probe() -> bool:
            raise next(errors)

        with pytest.raises(ProbeFatalError) as exc_info:
            prober.poll(probe, _identity, max_attempts=15, interval=0.1)

        assert exc_info.value.attempts == 2


class TestHttpProbe:
    """Test the HTTP probe builder against a mock transport."""

    @staticmethod
    def _client(handler) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler), base_url="http://mock/odcsapi")

    def test_probe_request_and_predicate(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path))
            return httpx.Response(204)

        with self._client(handler) as client:
            probe, predicate = http_probe(client, "DELETE", "/logout", 204)
            assert predicate(probe())

        assert seen == [("DELETE", "/odcsapi/logout")]

    def test_unexpected_status_is_not_ready(self, prober):
        with self._client(lambda request: httpx.Response(404)) as client:
            probe, predicate = http_probe(client, "DELETE", "/logout", 204)
            result = prober.poll(probe, predicate, max_attempts=3, interval=0.1)

        assert isinstance(result, TimedOut)
        assert result.attempts == 3

    def test_fatal_status_aborts(self, prober):
        with self._client(lambda request: httpx.Response(403)) as client:
            probe, predicate = http_probe(client, "DELETE", "/logout", 204, fatal_statuses={401, 403})
            with pytest.raises(ProbeFatalError) as exc_info:
                prober.poll(probe, predicate, max_attempts=3, interval=0.1)

        assert isinstance(exc_info.value.__cause__, FatalProbeResponse)
        assert exc_info.value.__cause__.response.status_code == 403

    def test_server_coming_up(self, prober):
        responses = iter([httpx.ConnectError("refused"), httpx.Response(503), httpx.Response(204)])

        def handler(request: httpx.Request) -> httpx.Response:
            item = next(responses)
            if isinstance(item, Exception):
                raise item
            return item

        with self._client(handler) as client:
            probe, predicate = http_probe(client, "DELETE", "/logout", 204)
            result = prober.poll(probe, predicate, max_attempts=15, interval=0.1)

        assert isinstance(result, Ready)
        assert result.attempts == 3


def test_real_clock_elapsed_is_monotonic():
    start = time.monotonic()
    result = ReadinessProber().poll(CountingProbe(succeed_on=2), _identity, max_attempts=3, interval=0.01)

    assert isinstance(result, Ready)
    assert 0 <= result.elapsed <= time.monotonic() - start
