"""
Readiness probing.

``ReadinessProber.poll`` issues a probe until a success predicate holds or
the attempt budget runs out. Failures that look like "still starting up"
(connection refused, timeouts, a server closing the connection, an unexpected
status) are retried after a fixed delay; failures that waiting cannot fix are
raised straight away as ``ProbeFatalError``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Collection, Tuple, TypeVar, Union

import httpx

from odcs_harness.core.errors import ProbeFatalError, ReadinessTimeoutError
from odcs_harness.core.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_RETRIABLE_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    OSError,
)


@dataclass(frozen=True)
class Ready:
    """The probe succeeded."""

    attempts: int
    elapsed: float


@dataclass(frozen=True)
class TimedOut:
    """Every attempt failed."""

    attempts: int
    elapsed: float

    def raise_error(self, description: str = "Server") -> None:
        raise ReadinessTimeoutError(description, self.attempts, self.elapsed)


ReadinessResult = Union[Ready, TimedOut]


class FatalProbeResponse(Exception):
    """Raised by a probe when the response rules out becoming ready."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        super().__init__(f"{response.request.method} {response.request.url} returned {response.status_code}")


def is_retriable(exc: BaseException) -> bool:
    """Return True when ``exc`` means "not ready yet" rather than "never will be"."""
    return isinstance(exc, _RETRIABLE_ERRORS)


def http_probe(
    client: httpx.Client,
    method: str,
    path: str,
    expected_status: int,
    fatal_statuses: Collection[int] = (),
) -> Tuple[Callable[[], httpx.Response], Callable[[httpx.Response], bool]]:
    """Build a ``(probe, predicate)`` pair for an HTTP liveness request.

    Args:
        client: Client whose ``base_url`` points at the deployment
        method: HTTP method of the request
        path: Path relative to the client's base URL
        expected_status: Status that means ready
        fatal_statuses: Statuses that abort polling

    Returns:
        Probe callable and the predicate to judge its response
    """

    def probe() -> httpx.Response:
        response = client.request(method, path.lstrip("/"))
        if response.status_code in fatal_statuses:
            raise FatalProbeResponse(response)
        return response

    def predicate(response: httpx.Response) -> bool:
        return response.status_code == expected_status

    return probe, predicate


class ReadinessProber:
    """Bounded, sleep-based polling loop."""

    def __init__(
        self,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sleep = sleep
        self._clock = clock

    def poll(
        self,
        probe: Callable[[], T],
        predicate: Callable[[T], bool],
        max_attempts: int,
        interval: float,
    ) -> ReadinessResult:
        """Probe until ``predicate`` holds or ``max_attempts`` are used up.

        Args:
            probe: Issues one readiness request
            predicate: Judges the probe's result
            max_attempts: Total attempts, at least 1
            interval: Seconds to sleep after each failed attempt

        Returns:
            ``Ready`` on the first success, ``TimedOut`` once the budget is spent

        Raises:
            ProbeFatalError: A failure classified as not retriable
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

        start = self._clock()
        for attempt in range(1, max_attempts + 1):
            try:
                if predicate(probe()):
                    elapsed = self._clock() - start
                    logger.info(f"Server is up! (attempt {attempt}, {elapsed:.2f}s)")
                    return Ready(attempts=attempt, elapsed=elapsed)
                logger.debug(f"Probe attempt {attempt} did not satisfy the readiness check")
            except Exception as e:
                if not is_retriable(e):
                    raise ProbeFatalError(f"{type(e).__name__}: {e}", attempt, self._clock() - start) from e
                logger.debug(f"Probe attempt {attempt} failed: {type(e).__name__}: {e}")
            logger.info("Waiting for the server to start...")
            self._sleep(interval)

        elapsed = self._clock() - start
        logger.warning(f"Server not ready after {max_attempts} attempts ({elapsed:.2f}s)")
        return TimedOut(attempts=max_attempts, elapsed=elapsed)
