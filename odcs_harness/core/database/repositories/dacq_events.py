"""
Data acquisition event repository.

Events are append-only from the application's point of view; the only delete
offered is the per-platform purge tests use to clean up after themselves.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import Session, delete, select

from ..entities.dacq_events import DacqEvent
from .base import BaseRepository


class DacqEventRepository(BaseRepository[DacqEvent]):
    """DAO handle for acquisition events."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, DacqEvent)

    def write_event(self, event: DacqEvent) -> DacqEvent:
        """Append an event.

        Args:
            event: DacqEvent SQLModel instance

        Returns:
            Persisted event with its generated id
        """
        self.session.add(event)
        self._commit()
        self.session.refresh(event)
        return event

    def delete_events_for_platform(self, platform_id: int) -> int:
        """Delete every event logged for a platform.

        Returns:
            Number of rows removed
        """
        stmt = delete(DacqEvent).where(DacqEvent.platform_id == platform_id)
        result = self.session.exec(stmt)  # type: ignore[call-overload]
        self._commit()
        return result.rowcount or 0

    def get_events_for_platform(self, platform_id: int, limit: Optional[int] = None) -> List[DacqEvent]:
        """Get events of a platform in chronological order."""
        stmt = select(DacqEvent).where(DacqEvent.platform_id == platform_id).order_by(DacqEvent.event_time.asc())
        if limit:
            stmt = stmt.limit(limit)
        return list(self.session.exec(stmt).all())
