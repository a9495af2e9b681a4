"""SQLAlchemy model for dictations."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from dictation_api.models.base import Base, utcnow

MAX_TITLE_LENGTH = 255
MAX_LANGUAGE_LENGTH = 10


class Dictation(Base):
    __tablename__ = "dictations"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(MAX_TITLE_LENGTH), nullable=False)
    language = Column(String(MAX_LANGUAGE_LENGTH), nullable=False, default="ru")
    description = Column(Text, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    author_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    author = relationship("User", back_populates="dictations", lazy="joined")
    # Children are removed explicitly by the store, never through ORM cascades.
    words = relationship(
        "Word",
        back_populates="dictation",
        order_by="Word.id",
        lazy="raise_on_sql",
        passive_deletes=True,
    )
    practices = relationship(
        "DictationPractice",
        back_populates="dictation",
        lazy="raise_on_sql",
        passive_deletes=True,
    )


__all__ = ["Dictation", "MAX_TITLE_LENGTH", "MAX_LANGUAGE_LENGTH"]
