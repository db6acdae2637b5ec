"""
Fixture record helpers.

Each helper performs exactly one write or delete through its own DAO handle
and releases the handle before returning or raising. Any failure surfaces as a
``FixtureDataError`` whose message names the operation; the subclass tells
connectivity problems apart from rows the database refused.
"""

from __future__ import annotations

from sqlalchemy.exc import DisconnectionError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from odcs_harness.core.database.entities import DacqEvent, ScheduleEntryStatus
from odcs_harness.core.database.tsdb import TimeSeriesDatabase
from odcs_harness.core.errors import FixtureConnectionError, FixtureConstraintError, FixtureDataError
from odcs_harness.core.logging_config import get_logger

logger = get_logger(__name__)

_CONNECTION_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError, ConnectionError)


def classify_failure(message: str, cause: Exception) -> FixtureDataError:
    """Pick the ``FixtureDataError`` subclass matching the underlying cause."""
    if isinstance(cause, IntegrityError):
        return FixtureConstraintError(message, cause)
    if isinstance(cause, _CONNECTION_ERRORS):
        return FixtureConnectionError(message, cause)
    return FixtureDataError(message, cause)


class DatabaseFixtures:
    """Ad hoc fixture writes and deletes invoked directly from test bodies."""

    def __init__(self, database: TimeSeriesDatabase) -> None:
        self.database = database

    def store_schedule_entry_status(self, status: ScheduleEntryStatus) -> ScheduleEntryStatus:
        try:
            with self.database.make_schedule_entry_dao() as dao:
                stored = dao.write_schedule_status(status)
        except Exception as e:
            raise classify_failure("Unable to store schedule entry status", e) from e
        logger.debug(f"Stored {stored!r}")
        return stored

    def delete_schedule_entry_status(self, schedule_entry_id: int) -> int:
        try:
            with self.database.make_schedule_entry_dao() as dao:
                removed = dao.delete_schedule_status_for(schedule_entry_id)
        except Exception as e:
            raise classify_failure("Unable to delete schedule entry status for specified schedule entry", e) from e
        logger.debug(f"Deleted {removed} status rows for schedule entry {schedule_entry_id}")
        return removed

    def store_dacq_event(self, event: DacqEvent) -> DacqEvent:
        try:
            with self.database.make_dacq_event_dao() as dao:
                stored = dao.write_event(event)
        except Exception as e:
            raise classify_failure("Unable to store event", e) from e
        logger.debug(f"Stored {stored!r}")
        return stored

    def delete_events_for_platform(self, platform_id: int) -> int:
        try:
            with self.database.make_dacq_event_dao() as dao:
                removed = dao.delete_events_for_platform(platform_id)
        except Exception as e:
            raise classify_failure("Unable to delete events for specified platform", e) from e
        logger.debug(f"Deleted {removed} events for platform {platform_id}")
        return removed
