"""
Database layer for fixture records.

Structure:
- entities/: SQLModel table models for fixture rows
- repositories/: DAO handles, one session each
- tsdb.py: ``TimeSeriesDatabase``, the DAO handle factory
- utils.py: Engine, session factory and schema helpers
"""

from .base import Base
from .tsdb import TimeSeriesDatabase
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "TimeSeriesDatabase",
    "create_all",
    "create_engine",
    "create_sessionmaker",
]
