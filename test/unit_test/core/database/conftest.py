"""Test configuration for database unit tests.

Fixtures build a file-backed SQLite database per test so every DAO handle,
each with its own session, sees the same data.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import pytest

from odcs_harness.core.database.entities import DacqEvent, ScheduleEntryStatus
from odcs_harness.core.database.tsdb import TimeSeriesDatabase


@pytest.fixture(scope="function")
def tsdb(tmp_path: Path) -> Iterator[TimeSeriesDatabase]:
    """Create a migrated SQLite database for one test."""
    database = TimeSeriesDatabase.from_url(f"sqlite:///{tmp_path / 'tsdb.db'}")
    database.create_all()
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture(scope="function")
def sample_schedule_status() -> ScheduleEntryStatus:
    return ScheduleEntryStatus(
        schedule_entry_id=42,
        run_start=datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc),
        run_stop=datetime(2024, 5, 1, 12, 5, 0, tzinfo=timezone.utc),
        hostname="routing-host",
        run_status="Complete",
        num_messages=12,
        num_decode_errors=1,
        num_platforms=3,
        last_source="goes-lrgs",
        last_consumer="file",
    )


@pytest.fixture(scope="function")
def sample_dacq_event() -> DacqEvent:
    return DacqEvent(
        platform_id=7,
        event_time=datetime(2024, 5, 1, 12, 1, 0, tzinfo=timezone.utc),
        priority=3,
        subsystem="routing",
        event_text="Retrieved 12 messages",
    )
