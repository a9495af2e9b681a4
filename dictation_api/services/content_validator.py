"""Language and length rules applied to dictation words."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from dictation_api.models.word import MAX_WORD_LENGTH
from dictation_api.services.errors import ContentError, ContentErrorKind

# Cyrillic letters only; U+0482-U+0489 are a sign and combining marks.
_CYRILLIC = "\u0400-\u0481\u048a-\u04ff"
_LATIN = "A-Za-z\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u024f"

_CYRILLIC_PATTERN = re.compile(f"[{_CYRILLIC}]")
_LATIN_PATTERN = re.compile(f"[{_LATIN}]")
_MEANINGFUL_PATTERN = re.compile(f"[{_LATIN}{_CYRILLIC}0-9]")


def _preview(text: str, limit: int = 20) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def check_word_content(text: str, language: str) -> Optional[ContentError]:
    """Return the first rule the text violates, or None when it is acceptable.

    Rules are checked in a fixed order: length, script for ``en`` and ``ru``,
    then presence of at least one letter or digit.
    """

    if len(text) > MAX_WORD_LENGTH:
        return ContentError(
            ContentErrorKind.TOO_LONG,
            f'Word "{_preview(text)}" is too long (max {MAX_WORD_LENGTH} chars).',
        )

    if language == "en" and _CYRILLIC_PATTERN.search(text):
        return ContentError(
            ContentErrorKind.SCRIPT_MISMATCH,
            f'English dictation cannot contain Russian text: "{text}"',
        )

    if language == "ru" and _LATIN_PATTERN.search(text):
        return ContentError(
            ContentErrorKind.SCRIPT_MISMATCH,
            f'Russian dictation cannot contain English text: "{text}"',
        )

    if not _MEANINGFUL_PATTERN.search(text):
        return ContentError(
            ContentErrorKind.EMPTY_CONTENT,
            f'Word must contain at least one letter or number: "{text}"',
        )

    return None


def validate_word_content(text: str, language: str) -> None:
    """Raise ``ContentError`` when the text breaks a content rule."""

    error = check_word_content(text, language)
    if error is not None:
        raise error


def validate_words(texts: Iterable[str], language: str) -> None:
    """Validate every text, stopping at the first violation."""

    for text in texts:
        validate_word_content(text, language)


__all__ = ["check_word_content", "validate_word_content", "validate_words"]
