"""Shared declarative base for all SQLAlchemy ORM models."""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Timezone-aware "now" used for column defaults."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class imported by all model modules to register metadata."""

    pass
