"""
Base repository interfaces and utilities.

A repository here is a DAO handle: it owns exactly one database session for
its lifetime and must be closed when the caller is done with it. Use it as a
context manager so the session is released on every exit path::

    with ScheduleEntryRepository(session_factory()) as dao:
        dao.write_schedule_status(status)
"""

from __future__ import annotations

from abc import ABC
from types import TracebackType
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlmodel import Session, SQLModel

from odcs_harness.core.logging_config import get_logger

logger = get_logger(__name__)

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)
RepositoryType = TypeVar("RepositoryType", bound="BaseRepository[Any]")


class BaseRepository(ABC, Generic[EntityType]):
    """Session-owning DAO base with scoped release."""

    def __init__(self, session: Session, model: Type[EntityType]) -> None:
        """Initialize repository with a database session and SQLModel entity class.

        Args:
            session: SQLModel Session owned by this handle
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the underlying session. Calling it again is a no-op."""
        if self._closed:
            return
        self._closed = True
        self.session.close()
        logger.debug("Released %s handle", type(self).__name__)

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def __enter__(self: RepositoryType) -> RepositoryType:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            if exc_type is not None and not self._closed:
                self.session.rollback()
        finally:
            self.close()


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a SQLModel select statement.

        Args:
            stmt: SQLModel select statement
            model: SQLModel entity class
            filters: Dictionary of field filters

        Returns:
            Modified select statement with filters applied
        """
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply pagination to a SQLModel select statement."""
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt
