"""
Harness error taxonomy.

Every failure raised by the harness derives from ``HarnessError`` so test
frameworks can tell "the environment is broken" apart from an ordinary
assertion failure inside a test body.
"""

from __future__ import annotations

from typing import Optional


class HarnessError(Exception):
    """Root of all harness errors."""


class ConfigurationError(HarnessError):
    """Raised when the harness configuration is incomplete or invalid."""


class StartupError(HarnessError):
    """Raised when the embedded server cannot bind or initialize."""

    def __init__(self, message: str, port: Optional[int] = None) -> None:
        self.port = port
        super().__init__(message)


class ReadinessError(HarnessError):
    """Base class for readiness probe failures."""

    def __init__(self, message: str, attempts: int, elapsed: float) -> None:
        self.attempts = attempts
        self.elapsed = elapsed
        super().__init__(message)


class ReadinessTimeoutError(ReadinessError):
    """The probe exhausted its attempt budget without a healthy response."""

    def __init__(self, description: str, attempts: int, elapsed: float) -> None:
        super().__init__(
            f"{description} didn't start in time: no healthy response after "
            f"{attempts} attempts ({elapsed:.2f}s)",
            attempts,
            elapsed,
        )


class ProbeFatalError(ReadinessError):
    """The probe hit a failure that waiting will not fix."""

    def __init__(self, reason: str, attempts: int, elapsed: float) -> None:
        super().__init__(f"Readiness probe failed fatally on attempt {attempts}: {reason}", attempts, elapsed)


class FixtureDataError(HarnessError):
    """A fixture write or delete failed.

    The message names the failed operation and the original exception is kept
    both as ``cause`` and as ``__cause__`` (when raised with ``from``).
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        detail = f": {type(cause).__name__}: {cause}" if cause is not None else ""
        super().__init__(f"{message}{detail}")


class FixtureConnectionError(FixtureDataError):
    """The database could not be reached or the connection dropped."""


class FixtureConstraintError(FixtureDataError):
    """The database rejected the fixture row (unique, foreign key, not-null)."""
