"""Dictation authoring pipeline: validate, resolve audio, persist.

Every write path follows the same order. Content rules are checked for the
whole word set first, so a rejected word leaves nothing behind. Audio is
resolved next, outside any database transaction, so a slow speech provider
never holds a transaction open. Rows are written last, inside a single
transaction. If that commit fails, audio files already stored for the words
stay behind unreferenced.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from dictation_api.config.settings import settings
from dictation_api.models import Dictation, DictationPractice, Word
from dictation_api.services.audio_resolver import AudioResolver, WordInput
from dictation_api.services.content_validator import validate_words
from dictation_api.services.dictation_store import DictationStore
from dictation_api.services.errors import (
    AccessDeniedError,
    InvalidInputError,
    NotFoundError,
)
from dictation_api.telemetry import observe_authoring

logger = logging.getLogger(__name__)


def clean_words(words: Sequence[WordInput]) -> list[WordInput]:
    """Trim text, drop blank entries and turn empty hints/URLs into None."""

    cleaned: list[WordInput] = []
    for word in words:
        text = (word.text or "").strip()
        if not text:
            continue
        cleaned.append(
            WordInput(
                text=text,
                hint=(word.hint or "").strip() or None,
                audio_url=(word.audio_url or "").strip() or None,
            )
        )
    return cleaned


def _ensure_owner(dictation: Dictation, user_id: int) -> None:
    if dictation.author_id != user_id:
        raise AccessDeniedError("Access denied: not the owner")


def _ensure_readable(dictation: Dictation, user_id: int) -> None:
    if not dictation.is_public and dictation.author_id != user_id:
        raise AccessDeniedError("Access denied: dictation is private")


class AuthoringService:
    """Ownership-scoped operations on dictations and their words."""

    def __init__(self, store: DictationStore, resolver: AudioResolver) -> None:
        self._store = store
        self._resolver = resolver

    def _prepare(self, words: Sequence[WordInput], language: str) -> list[WordInput]:
        cleaned = clean_words(words)
        if not cleaned:
            raise InvalidInputError("The list of words cannot be empty.")
        validate_words((word.text for word in cleaned), language)
        return cleaned

    async def create_dictation(
        self,
        user_id: int,
        title: str,
        language: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Dictation:
        """Create an empty placeholder dictation."""

        return await self._store.create_dictation(
            user_id,
            title,
            language or settings.tts.default_language,
            description,
        )

    async def create_with_words(
        self,
        user_id: int,
        title: str,
        language: Optional[str],
        words: Sequence[WordInput],
        is_public: bool = False,
        description: Optional[str] = None,
    ) -> Dictation:
        language = language or settings.tts.default_language
        try:
            prepared = self._prepare(words, language)
        except InvalidInputError:
            observe_authoring("create", "rejected")
            raise

        resolved = await self._resolver.resolve_words(prepared, language)
        dictation = await self._store.create_with_words(
            user_id,
            title,
            language,
            description,
            is_public,
            resolved,
        )
        observe_authoring("create", "ok")
        logger.info(
            "User %s created dictation %s with %d words",
            user_id,
            dictation.id,
            len(resolved),
        )
        return dictation

    async def update_full_dictation(
        self,
        dictation_id: int,
        user_id: int,
        title: str,
        description: Optional[str],
        language: Optional[str],
        words: Sequence[WordInput],
        is_public: Optional[bool] = None,
    ) -> Dictation:
        """Replace metadata and the entire word set of an owned dictation.

        Audio is regenerated for every word; URLs resolved for the previous
        word set are not carried over.
        """

        language = language or settings.tts.default_language
        dictation = await self._store.get_by_id(dictation_id)
        _ensure_owner(dictation, user_id)
        try:
            prepared = self._prepare(words, language)
        except InvalidInputError:
            observe_authoring("update", "rejected")
            raise

        await self._store.end_read()
        resolved = await self._resolver.resolve_words(prepared, language, regenerate=True)
        await self._store.replace_dictation(
            dictation,
            title,
            description,
            language,
            is_public,
            resolved,
        )
        observe_authoring("update", "ok")
        logger.info(
            "User %s replaced dictation %s with %d words",
            user_id,
            dictation_id,
            len(resolved),
        )
        return await self._store.get_by_id(dictation_id, with_words=True)

    async def delete_dictation(self, dictation_id: int, user_id: int) -> None:
        dictation = await self._store.get_by_id(dictation_id)
        _ensure_owner(dictation, user_id)
        await self._store.delete_dictation_cascade(dictation_id)
        observe_authoring("delete", "ok")
        logger.info("User %s deleted dictation %s", user_id, dictation_id)

    async def save_practice(
        self,
        user_id: int,
        dictation_id: int,
        score: float,
        total_words: int,
        correct_count: int,
        errors: Optional[Sequence[dict[str, Any]]] = None,
    ) -> DictationPractice:
        """Append one practice result attributed to ``user_id``."""

        if not 0 <= score <= 100:
            raise InvalidInputError("Score must be between 0 and 100.")
        if correct_count < 0:
            raise InvalidInputError("Correct count cannot be negative.")
        if total_words < correct_count:
            raise InvalidInputError("Correct count cannot exceed the total number of words.")

        dictation = await self._store.get_by_id(dictation_id)
        _ensure_readable(dictation, user_id)
        practice = await self._store.record_practice(
            user_id,
            dictation_id,
            score,
            total_words,
            correct_count,
            list(errors) if errors else None,
        )
        observe_authoring("practice", "ok")
        return practice

    async def add_word(
        self,
        user_id: int,
        dictation_id: int,
        text: str,
        hint: Optional[str] = None,
        audio_url: Optional[str] = None,
    ) -> Word:
        """Append a single word to an owned dictation."""

        dictation = await self._store.get_by_id(dictation_id)
        _ensure_owner(dictation, user_id)
        (word,) = self._prepare(
            [WordInput(text=text, hint=hint, audio_url=audio_url)],
            dictation.language,
        )

        await self._store.end_read()
        (resolved,) = await self._resolver.resolve_words([word], dictation.language)
        return await self._store.add_word(dictation, resolved)

    async def delete_word(self, word_id: int, user_id: int) -> None:
        word = await self._store.find_word(word_id)
        if word is None:
            raise NotFoundError("Word not found")
        if word.author_id != user_id:
            raise AccessDeniedError("Access denied")
        await self._store.delete_word(word)

    async def list_words(self, user_id: int) -> list[Word]:
        return await self._store.list_words_by_author(user_id)

    async def get_all(self, user_id: int) -> list[Dictation]:
        return await self._store.list_by_author(user_id)

    async def get_public(self) -> list[Dictation]:
        return await self._store.list_public()

    async def get_history(self, user_id: int) -> list[DictationPractice]:
        return await self._store.list_history_by_user(user_id)

    async def get_one(self, dictation_id: int, user_id: int) -> Dictation:
        dictation = await self._store.get_by_id(dictation_id, with_words=True)
        _ensure_readable(dictation, user_id)
        return dictation


__all__ = ["AuthoringService", "clean_words"]
