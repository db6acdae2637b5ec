"""
Database utility functions for engine and session management.

Functions:
- create_engine: Creates a SQLAlchemy engine with settings suited to tests
- create_sessionmaker: Creates a session factory with safe defaults
- create_all: Creates all fixture tables from ORM metadata
"""

from __future__ import annotations

from sqlalchemy import Engine
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session

from .base import Base


def create_engine(db_url: str, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine.

    SQLite connections are allowed to cross threads because the embedded
    server and the test body share the same database file.

    Args:
        db_url: Database connection URL
        echo: Log SQL statements when True

    Returns:
        Configured Engine instance
    """
    url = make_url(db_url)
    connect_args = {"check_same_thread": False} if url.get_backend_name() == "sqlite" else {}
    return sa_create_engine(url, echo=echo, pool_pre_ping=True, connect_args=connect_args)


def create_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    """Create a ``sessionmaker`` producing SQLModel sessions.

    Args:
        engine: SQLAlchemy engine

    Returns:
        Configured session factory
    """
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


def create_all(engine: Engine) -> None:
    """Create all fixture tables for the current ORM metadata.

    Intended for tests and local development; real deployments own their
    schema.
    """
    from . import entities  # noqa: F401  registers the table models

    Base.metadata.create_all(engine)
