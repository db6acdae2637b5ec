"""
Schedule entry status repository.

Provides the write, delete and read paths for schedule entry status rows.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlmodel import Session, delete, select

from ..base import utc_now
from ..entities.schedule_entries import ScheduleEntryStatus
from .base import BaseRepository, QueryBuilder


class ScheduleEntryRepository(BaseRepository[ScheduleEntryStatus]):
    """DAO handle for schedule entry status rows."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, ScheduleEntryStatus)

    def write_schedule_status(self, status: ScheduleEntryStatus) -> ScheduleEntryStatus:
        """Insert or update a schedule entry status.

        Args:
            status: Status row; ``id`` is assigned on insert

        Returns:
            The persisted row with generated fields populated
        """
        status.last_modified = utc_now()
        status = self.session.merge(status) if status.id is not None else status
        self.session.add(status)
        self._commit()
        self.session.refresh(status)
        return status

    def delete_schedule_status_for(self, schedule_entry_id: int) -> int:
        """Delete every status row of a schedule entry.

        Returns:
            Number of rows removed
        """
        stmt = delete(ScheduleEntryStatus).where(ScheduleEntryStatus.schedule_entry_id == schedule_entry_id)
        result = self.session.exec(stmt)  # type: ignore[call-overload]
        self._commit()
        return result.rowcount or 0

    def get_schedule_status_for(self, schedule_entry_id: int) -> List[ScheduleEntryStatus]:
        """Get status rows of a schedule entry, most recent run first."""
        stmt = (
            select(ScheduleEntryStatus)
            .where(ScheduleEntryStatus.schedule_entry_id == schedule_entry_id)
            .order_by(ScheduleEntryStatus.run_start.desc())
        )
        return list(self.session.exec(stmt).all())

    def list_schedule_statuses(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[ScheduleEntryStatus]:
        stmt = select(ScheduleEntryStatus).order_by(ScheduleEntryStatus.id)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, ScheduleEntryStatus, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        return list(self.session.exec(stmt).all())
