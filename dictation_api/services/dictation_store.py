"""Persistence of dictations, their words and practice records."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value
from sqlalchemy.orm.exc import StaleDataError

from dictation_api.models import Dictation, DictationPractice, Word
from dictation_api.services.audio_resolver import ResolvedWord
from dictation_api.services.errors import NotFoundError, StorageFailure

logger = logging.getLogger(__name__)


class DictationStore:
    """Owns every read and write of the dictation tables for one session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Commit the enclosed writes together or roll all of them back."""

        try:
            yield self._session
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.exception("Dictation storage transaction failed")
            raise StorageFailure("Storage operation failed") from exc
        except BaseException:
            await self._session.rollback()
            raise

    async def end_read(self) -> None:
        """Close the transaction opened implicitly by earlier reads."""

        if self._session.in_transaction():
            try:
                await self._session.commit()
            except SQLAlchemyError as exc:
                raise StorageFailure("Storage operation failed") from exc

    async def _fetch(self, statement: Any) -> Any:
        try:
            return await self._session.execute(statement)
        except SQLAlchemyError as exc:
            logger.exception("Dictation storage query failed")
            raise StorageFailure("Storage operation failed") from exc

    @staticmethod
    def _word_rows(
        words: Sequence[ResolvedWord],
        *,
        author_id: int,
        dictation_id: int,
    ) -> list[Word]:
        return [
            Word(
                text=word.text,
                hint=word.hint,
                audio_url=word.audio_url,
                author_id=author_id,
                dictation_id=dictation_id,
            )
            for word in words
        ]

    # -- dictations -----------------------------------------------------------

    async def create_dictation(
        self,
        author_id: int,
        title: str,
        language: str,
        description: Optional[str] = None,
        is_public: bool = False,
    ) -> Dictation:
        dictation = Dictation(
            title=title,
            language=language,
            description=description,
            is_public=is_public,
            author_id=author_id,
        )
        async with self.transaction() as session:
            session.add(dictation)
        set_committed_value(dictation, "words", [])
        return dictation

    async def create_with_words(
        self,
        author_id: int,
        title: str,
        language: str,
        description: Optional[str],
        is_public: bool,
        words: Sequence[ResolvedWord],
    ) -> Dictation:
        """Insert the dictation then all of its words in one transaction."""

        dictation = Dictation(
            title=title,
            language=language,
            description=description,
            is_public=is_public,
            author_id=author_id,
        )
        async with self.transaction() as session:
            session.add(dictation)
            await session.flush()
            rows = self._word_rows(words, author_id=author_id, dictation_id=dictation.id)
            session.add_all(rows)
            await session.flush()
        set_committed_value(dictation, "words", rows)
        return dictation

    async def _lock_dictation(self, dictation_id: int) -> None:
        """Lock the row for the rest of the transaction, or fail if it is gone."""

        result = await self._session.execute(
            select(Dictation.id).where(Dictation.id == dictation_id).with_for_update()
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Dictation not found")

    async def _apply_meta(
        self,
        dictation: Dictation,
        title: str,
        description: Optional[str],
        language: str,
        is_public: Optional[bool],
    ) -> None:
        dictation.title = title
        dictation.description = description
        dictation.language = language
        if is_public is not None:
            dictation.is_public = is_public
        try:
            await self._session.flush()
        except StaleDataError as exc:
            # The row vanished since it was read; another request deleted it.
            raise NotFoundError("Dictation not found") from exc

    async def _replace_words(
        self,
        dictation_id: int,
        author_id: int,
        words: Sequence[ResolvedWord],
    ) -> None:
        await self._session.execute(delete(Word).where(Word.dictation_id == dictation_id))
        self._session.add_all(
            self._word_rows(words, author_id=author_id, dictation_id=dictation_id)
        )
        await self._session.flush()

    async def update_dictation_meta(
        self,
        dictation: Dictation,
        title: str,
        description: Optional[str],
        language: str,
        is_public: Optional[bool] = None,
    ) -> Dictation:
        """Update scalar fields only; the word set is untouched."""

        async with self.transaction():
            await self._apply_meta(dictation, title, description, language, is_public)
        return dictation

    async def replace_words(
        self,
        dictation: Dictation,
        words: Sequence[ResolvedWord],
    ) -> None:
        """Delete every word of the dictation and insert the new set."""

        async with self.transaction():
            await self._lock_dictation(dictation.id)
            await self._replace_words(dictation.id, dictation.author_id, words)

    async def replace_dictation(
        self,
        dictation: Dictation,
        title: str,
        description: Optional[str],
        language: str,
        is_public: Optional[bool],
        words: Sequence[ResolvedWord],
    ) -> None:
        """Metadata update and full word replacement, committed together."""

        async with self.transaction():
            await self._lock_dictation(dictation.id)
            await self._apply_meta(dictation, title, description, language, is_public)
            await self._replace_words(dictation.id, dictation.author_id, words)

    async def delete_dictation_cascade(self, dictation_id: int) -> None:
        """Remove words, practice records and the dictation, children first."""

        async with self.transaction() as session:
            await session.execute(delete(Word).where(Word.dictation_id == dictation_id))
            await session.execute(
                delete(DictationPractice).where(
                    DictationPractice.dictation_id == dictation_id
                )
            )
            result = await session.execute(
                delete(Dictation).where(Dictation.id == dictation_id)
            )
            if result.rowcount == 0:
                raise NotFoundError("Dictation not found")

    async def find_by_id(
        self,
        dictation_id: int,
        *,
        with_words: bool = False,
    ) -> Optional[Dictation]:
        statement = select(Dictation).where(Dictation.id == dictation_id)
        if with_words:
            statement = statement.options(selectinload(Dictation.words))
            statement = statement.execution_options(populate_existing=True)
        result = await self._fetch(statement)
        return result.scalar_one_or_none()

    async def get_by_id(self, dictation_id: int, *, with_words: bool = False) -> Dictation:
        dictation = await self.find_by_id(dictation_id, with_words=with_words)
        if dictation is None:
            raise NotFoundError("Dictation not found")
        return dictation

    async def list_by_author(self, author_id: int) -> list[Dictation]:
        result = await self._fetch(
            select(Dictation)
            .where(Dictation.author_id == author_id)
            .options(selectinload(Dictation.words))
            .order_by(Dictation.created_at.desc(), Dictation.id.desc())
        )
        return list(result.scalars().all())

    async def list_public(self) -> list[Dictation]:
        result = await self._fetch(
            select(Dictation)
            .where(Dictation.is_public.is_(True))
            .options(selectinload(Dictation.words))
            .order_by(Dictation.created_at.desc(), Dictation.id.desc())
        )
        return list(result.scalars().all())

    # -- practice ---------------------------------------------------------------

    async def record_practice(
        self,
        user_id: int,
        dictation_id: int,
        score: float,
        total_words: int,
        correct_count: int,
        errors: Optional[list[dict[str, Any]]],
    ) -> DictationPractice:
        practice = DictationPractice(
            user_id=user_id,
            dictation_id=dictation_id,
            score=score,
            total_words=total_words,
            correct_count=correct_count,
            errors=errors or None,
        )
        async with self.transaction() as session:
            session.add(practice)
        return practice

    async def list_history_by_user(self, user_id: int) -> list[DictationPractice]:
        result = await self._fetch(
            select(DictationPractice)
            .where(DictationPractice.user_id == user_id)
            .order_by(DictationPractice.created_at.desc(), DictationPractice.id.desc())
        )
        return list(result.scalars().all())

    async def count_practices(self, dictation_id: int) -> int:
        result = await self._fetch(
            select(func.count())
            .select_from(DictationPractice)
            .where(DictationPractice.dictation_id == dictation_id)
        )
        return result.scalar_one()

    # -- single words -----------------------------------------------------------

    async def list_words(self, dictation_id: int) -> list[Word]:
        result = await self._fetch(
            select(Word).where(Word.dictation_id == dictation_id).order_by(Word.id)
        )
        return list(result.scalars().all())

    async def add_word(self, dictation: Dictation, word: ResolvedWord) -> Word:
        (row,) = self._word_rows(
            [word], author_id=dictation.author_id, dictation_id=dictation.id
        )
        async with self.transaction() as session:
            session.add(row)
        return row

    async def find_word(self, word_id: int) -> Optional[Word]:
        result = await self._fetch(select(Word).where(Word.id == word_id))
        return result.scalar_one_or_none()

    async def delete_word(self, word: Word) -> None:
        async with self.transaction() as session:
            await session.execute(delete(Word).where(Word.id == word.id))

    async def list_words_by_author(self, author_id: int) -> list[Word]:
        result = await self._fetch(
            select(Word)
            .where(Word.author_id == author_id)
            .order_by(Word.created_at.desc(), Word.id.desc())
        )
        return list(result.scalars().all())


__all__ = ["DictationStore"]
