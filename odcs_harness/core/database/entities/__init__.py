"""
Database entity models.

Modules:
- schedule_entries: Execution outcomes of scheduled routing jobs
- dacq_events: Data acquisition events logged per platform
"""

from .dacq_events import DacqEvent
from .schedule_entries import ScheduleEntryStatus

__all__ = [
    "DacqEvent",
    "ScheduleEntryStatus",
]
