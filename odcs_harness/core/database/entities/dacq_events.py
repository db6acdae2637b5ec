"""
Data acquisition event entity models.

Acquisition events are the log lines a platform produces while its data is
retrieved and decoded. Tests store them to exercise the event endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, UtcDateTime, utc_now


class DacqEventBase(Base):
    """Base fields for acquisition event entity."""

    platform_id: Optional[int] = Field(default=None, index=True, description="Platform the event refers to")
    schedule_entry_status_id: Optional[int] = Field(default=None, description="Run that produced the event")
    event_time: datetime = Field(
        default_factory=utc_now,
        sa_type=UtcDateTime,
        description="Time the event was logged",
    )
    priority: int = Field(default=0, description="Log priority of the event")
    subsystem: Optional[str] = Field(default=None, max_length=24)
    msg_recv_time: Optional[datetime] = Field(
        default=None,
        sa_type=UtcDateTime,
        description="Receive time of the related message",
    )
    event_text: str = Field(default="", description="Human-readable event message")


class DacqEvent(DacqEventBase, table=True):
    """Entity for data acquisition events.

    Table: dacq_event
    """

    __tablename__ = "dacq_event"

    id: Optional[int] = Field(default=None, primary_key=True)

    def __repr__(self) -> str:
        return f"DacqEvent(id={self.id}, platform_id={self.platform_id}, priority={self.priority})"
