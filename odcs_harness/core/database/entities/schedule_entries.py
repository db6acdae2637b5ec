"""
Schedule entry status entity models.

A schedule entry status row records the outcome of one execution of a
scheduled routing job. Tests insert these rows directly to give the API
something to report without running the scheduler.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, UtcDateTime, utc_now


class ScheduleEntryStatusBase(Base):
    """Base fields for schedule entry status entity."""

    schedule_entry_id: int = Field(index=True, description="Schedule entry this execution belongs to")
    run_start: datetime = Field(
        default_factory=utc_now,
        sa_type=UtcDateTime,
        description="Time the run started",
    )
    run_stop: Optional[datetime] = Field(
        default=None,
        sa_type=UtcDateTime,
        description="Time the run finished",
    )
    last_message_time: Optional[datetime] = Field(
        default=None,
        sa_type=UtcDateTime,
        description="Time of the last message processed",
    )
    hostname: Optional[str] = Field(default=None, max_length=64, description="Host that executed the run")
    run_status: str = Field(default="", max_length=64, description="Free-form run status text")
    num_messages: int = Field(default=0, ge=0)
    num_decode_errors: int = Field(default=0, ge=0)
    num_platforms: int = Field(default=0, ge=0)
    last_source: Optional[str] = Field(default=None, max_length=32)
    last_consumer: Optional[str] = Field(default=None, max_length=32)


class ScheduleEntryStatus(ScheduleEntryStatusBase, table=True):
    """Entity for schedule entry execution outcomes.

    Table: schedule_entry_status
    """

    __tablename__ = "schedule_entry_status"

    id: Optional[int] = Field(default=None, primary_key=True)
    last_modified: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    def __repr__(self) -> str:
        return (
            f"ScheduleEntryStatus(id={self.id}, schedule_entry_id={self.schedule_entry_id}, "
            f"run_status={self.run_status!r})"
        )
