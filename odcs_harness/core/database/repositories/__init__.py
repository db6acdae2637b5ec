"""
Database repository layer using SQLModel.

Each repository is a DAO handle owning one session; see ``base`` for the
scoped-release contract.

Modules:
- base: BaseRepository handle contract and QueryBuilder utilities
- schedule_entries: Schedule entry status operations
- dacq_events: Acquisition event operations
"""

from .base import BaseRepository, QueryBuilder
from .dacq_events import DacqEventRepository
from .schedule_entries import ScheduleEntryRepository

__all__ = [
    "BaseRepository",
    "DacqEventRepository",
    "QueryBuilder",
    "ScheduleEntryRepository",
]
