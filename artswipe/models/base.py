"""
Base declarative class for SQLAlchemy models.

This module contains only the domain model base class and the timestamp helper.
Database connection logic lives in artswipe.core.database
"""

from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase


def utc_now():
    """Returns current UTC time with timezone awareness.

    Replaces deprecated datetime.utcnow()
    """
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
