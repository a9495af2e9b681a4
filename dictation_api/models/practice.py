"""SQLAlchemy model for recorded practice attempts."""

from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, func
from sqlalchemy.orm import relationship

from dictation_api.models.base import Base, utcnow


class DictationPractice(Base):
    __tablename__ = "dictation_practices"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    dictation_id = Column(
        ForeignKey("dictations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    score = Column(
        Float,
        nullable=False,
    )
    total_words = Column(
        Integer,
        nullable=False,
    )
    correct_count = Column(
        Integer,
        nullable=False,
    )
    errors = Column(
        JSON(none_as_null=True),
        nullable=True,
    )
    created_at = Column(
        DateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    # relationships
    dictation = relationship("Dictation", back_populates="practices", lazy="joined")
