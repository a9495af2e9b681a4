"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .dictation import MAX_LANGUAGE_LENGTH, MAX_TITLE_LENGTH, Dictation  # noqa: F401
from .practice import DictationPractice  # noqa: F401
from .user import User, UserRole  # noqa: F401
from .word import (  # noqa: F401
    MAX_AUDIO_URL_LENGTH,
    MAX_HINT_LENGTH,
    MAX_WORD_LENGTH,
    Word,
)

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Dictation",
    "Word",
    "DictationPractice",
    "MAX_WORD_LENGTH",
    "MAX_HINT_LENGTH",
    "MAX_AUDIO_URL_LENGTH",
    "MAX_TITLE_LENGTH",
    "MAX_LANGUAGE_LENGTH",
]
