"""SQLAlchemy model for application users."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Column, DateTime, Text
from sqlalchemy import Enum as SqlEnum
from sqlalchemy import Integer, String, func
from sqlalchemy.orm import relationship

from dictation_api.models.base import Base, utcnow


class UserRole(str, Enum):
    """Enumeration of supported user roles."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=True)
    password_hash = Column(String(256), nullable=False)
    role = Column(
        SqlEnum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.USER,
    )
    # Single active session: rotated with compare-and-swap on refresh.
    refresh_token = Column(Text, nullable=True)
    dictations = relationship(
        "Dictation",
        back_populates="author",
        foreign_keys="Dictation.author_id",
    )
    created_at = Column(
        DateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )


__all__ = ["User", "UserRole"]
