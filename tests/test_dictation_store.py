"""Transactional behaviour of the dictation store."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from dictation_api.models import Dictation
from dictation_api.services import (
    DictationStore,
    NotFoundError,
    ResolvedWord,
    StorageFailure,
)


def _words(*texts: str) -> list[ResolvedWord]:
    return [ResolvedWord(text=text, hint=None, audio_url=None) for text in texts]


async def test_failed_word_insert_rolls_back_dictation(store, session, make_user) -> None:
    owner = await make_user("owner@example.com")
    broken = _words("Apple") + [ResolvedWord(text=None, hint=None, audio_url=None)]

    with pytest.raises(StorageFailure):
        await store.create_with_words(owner.id, "Broken", "en", None, False, broken)

    count = await session.execute(select(func.count()).select_from(Dictation))
    assert count.scalar_one() == 0


async def test_replace_words_and_meta_update_are_independent(store, make_user) -> None:
    owner = await make_user("owner@example.com")
    dictation = await store.create_with_words(
        owner.id, "Colors", "en", None, False, _words("Red", "Blue")
    )

    await store.replace_words(dictation, _words("Green"))
    await store.update_dictation_meta(dictation, "Palette", "primary", "en", is_public=True)

    words = await store.list_words(dictation.id)
    reloaded = await store.get_by_id(dictation.id)
    assert [word.text for word in words] == ["Green"]
    assert words[0].author_id == owner.id
    assert reloaded.title == "Palette"
    assert reloaded.is_public is True


async def test_cascade_delete_of_missing_dictation(store) -> None:
    with pytest.raises(NotFoundError):
        await store.delete_dictation_cascade(12345)


async def test_practice_records_are_appended(store, make_user) -> None:
    owner = await make_user("owner@example.com")
    dictation = await store.create_with_words(
        owner.id, "Count", "en", None, True, _words("One")
    )

    await store.record_practice(owner.id, dictation.id, 100.0, 1, 1, [])
    await store.record_practice(owner.id, dictation.id, 0.0, 1, 0, None)

    assert await store.count_practices(dictation.id) == 2

    await store.delete_dictation_cascade(dictation.id)
    assert await store.count_practices(dictation.id) == 0


async def test_failed_replace_keeps_title_and_words(
    store, session_factory, make_user
) -> None:
    owner = await make_user("owner@example.com")
    dictation = await store.create_with_words(
        owner.id, "Colors", "en", None, False, _words("Red", "Blue")
    )
    broken = _words("Green") + [ResolvedWord(text=None, hint=None, audio_url=None)]

    with pytest.raises(StorageFailure):
        await store.replace_dictation(dictation, "Palette", "new", "en", True, broken)

    async with session_factory() as other:
        reloaded = await DictationStore(other).get_by_id(dictation.id, with_words=True)
        assert reloaded.title == "Colors"
        assert reloaded.is_public is False
        assert [word.text for word in reloaded.words] == ["Red", "Blue"]


async def test_replace_after_concurrent_delete_is_not_found(
    store, session_factory, make_user
) -> None:
    owner = await make_user("owner@example.com")
    dictation = await store.create_with_words(
        owner.id, "Gone", "en", None, False, _words("Red")
    )

    async with session_factory() as other:
        await DictationStore(other).delete_dictation_cascade(dictation.id)

    with pytest.raises(NotFoundError):
        await store.replace_dictation(dictation, "Back", None, "en", None, _words("Blue"))


async def test_ids_are_not_reused_after_delete(store, make_user) -> None:
    owner = await make_user("owner@example.com")
    first = await store.create_with_words(
        owner.id, "First", "en", None, False, _words("Red", "Blue")
    )
    old_word_ids = {word.id for word in first.words}
    await store.delete_dictation_cascade(first.id)

    second = await store.create_with_words(
        owner.id, "Second", "en", None, False, _words("Green", "Pink")
    )

    assert second.id != first.id
    assert old_word_ids.isdisjoint({word.id for word in second.words})


async def test_meta_update_after_concurrent_delete_is_not_found(
    store, session_factory, make_user
) -> None:
    owner = await make_user("owner@example.com")
    dictation = await store.create_with_words(
        owner.id, "Gone", "en", None, False, _words("Red")
    )

    async with session_factory() as other:
        await DictationStore(other).delete_dictation_cascade(dictation.id)

    with pytest.raises(NotFoundError):
        await store.update_dictation_meta(dictation, "Back", None, "en")
