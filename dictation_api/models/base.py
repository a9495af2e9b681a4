"""Declarative base shared by every ORM model."""

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp matching the ``DateTime`` columns."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


__all__ = ["Base", "utcnow"]
