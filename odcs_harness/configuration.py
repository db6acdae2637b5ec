"""
Database configuration collaborators.

A configuration prepares the database the server under test will use and
describes it as a flat key/value environment. The harness does not interpret
that environment; it re-exports it before the server starts and asks the
configuration for a ``TimeSeriesDatabase`` when tests need fixture rows.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, runtime_checkable

from sqlalchemy.engine import make_url

from odcs_harness.core.config import HarnessSettings
from odcs_harness.core.database.tsdb import TimeSeriesDatabase
from odcs_harness.core.errors import ConfigurationError
from odcs_harness.core.logging_config import get_logger

logger = get_logger(__name__)

DATABASE_URL_KEY = "DATABASE_URL"


@runtime_checkable
class Configuration(Protocol):
    """Contract of the external configuration collaborator."""

    def start(self) -> Mapping[str, str]:
        """Prepare the database and return the environment describing it."""

    def get_tsdb(self) -> TimeSeriesDatabase:
        """Return the database handle factory. Only valid after ``start``."""

    def stop(self) -> None:
        """Release whatever ``start`` acquired."""


class DatabaseUrlConfiguration:
    """Configuration for a database reachable through a SQLAlchemy URL."""

    def __init__(
        self,
        database_url: str,
        environment: Optional[Mapping[str, str]] = None,
        *,
        create_schema: bool = False,
    ) -> None:
        self.database_url = database_url
        self.environment: Dict[str, str] = dict(environment or {})
        self.create_schema = create_schema
        self._tsdb: Optional[TimeSeriesDatabase] = None

    @classmethod
    def from_settings(cls, settings: HarnessSettings) -> "DatabaseUrlConfiguration":
        if not settings.database_url:
            raise ConfigurationError("ODCS_HARNESS_DATABASE_URL is not set")
        return cls(settings.database_url, settings.passthrough)

    @property
    def started(self) -> bool:
        return self._tsdb is not None

    def start(self) -> Mapping[str, str]:
        if self._tsdb is None:
            self._tsdb = TimeSeriesDatabase.from_url(self.database_url)
            if self.create_schema:
                self._tsdb.create_all()
            logger.info(
                "Database configuration started for %s",
                make_url(self.database_url).render_as_string(hide_password=True),
            )
        return {**self.environment, DATABASE_URL_KEY: self.database_url}

    def get_tsdb(self) -> TimeSeriesDatabase:
        if self._tsdb is None:
            raise ConfigurationError("Configuration has not been started")
        return self._tsdb

    def stop(self) -> None:
        if self._tsdb is not None:
            self._tsdb.dispose()
            self._tsdb = None


class SqliteConfiguration(DatabaseUrlConfiguration):
    """File-backed SQLite database with the fixture schema created on start."""

    def __init__(self, path: Path, environment: Optional[Mapping[str, str]] = None) -> None:
        self.path = Path(path)
        super().__init__(f"sqlite:///{self.path}", environment, create_schema=True)

    def start(self) -> Mapping[str, str]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return super().start()
