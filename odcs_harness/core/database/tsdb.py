"""
Time series database handle.

``TimeSeriesDatabase`` is the factory the fixture helpers obtain DAO handles
from. Each ``make_*_dao`` call opens a fresh session owned by the returned
repository; the caller is responsible for closing it (normally with ``with``).
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session

from odcs_harness.core.logging_config import get_logger

from .repositories import DacqEventRepository, ScheduleEntryRepository
from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)


class TimeSeriesDatabase:
    """Engine plus session factory, handing out single-session DAO handles."""

    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker[Session]] = None) -> None:
        self.engine = engine
        self.session_factory = session_factory or create_sessionmaker(engine)

    @classmethod
    def from_url(cls, db_url: str, *, echo: bool = False) -> "TimeSeriesDatabase":
        return cls(create_engine(db_url, echo=echo))

    def create_all(self) -> None:
        create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
        logger.debug("Disposed engine for %s", self.engine.url.render_as_string(hide_password=True))

    def make_schedule_entry_dao(self) -> ScheduleEntryRepository:
        return ScheduleEntryRepository(self.session_factory())

    def make_dacq_event_dao(self) -> DacqEventRepository:
        return DacqEventRepository(self.session_factory())
