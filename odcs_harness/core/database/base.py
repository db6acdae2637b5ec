"""
Base database models and utilities.

This module provides the foundational database components used across
all fixture entities using SQLModel.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlmodel import SQLModel

# Column type for every timestamp; values are stored and returned timezone-aware
UtcDateTime = DateTime(timezone=True)


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def utc_now() -> datetime:
    """Get current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)
