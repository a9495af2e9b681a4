"""SQLAlchemy model for dictation words."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from dictation_api.models.base import Base, utcnow

MAX_WORD_LENGTH = 200
MAX_HINT_LENGTH = 500
MAX_AUDIO_URL_LENGTH = 1024


class Word(Base):
    __tablename__ = "words"
    # Ids are never reused after deletes, including on SQLite.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    text = Column(String(MAX_WORD_LENGTH), nullable=False)
    hint = Column(String(MAX_HINT_LENGTH), nullable=True)
    audio_url = Column(String(MAX_AUDIO_URL_LENGTH), nullable=True)
    author_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    dictation_id = Column(
        Integer,
        ForeignKey("dictations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    dictation = relationship("Dictation", back_populates="words")


__all__ = ["Word", "MAX_WORD_LENGTH", "MAX_HINT_LENGTH", "MAX_AUDIO_URL_LENGTH"]
