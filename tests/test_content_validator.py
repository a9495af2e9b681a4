"""Language and length rules for dictation words."""

from __future__ import annotations

import pytest

from dictation_api.services import (
    ContentError,
    ContentErrorKind,
    check_word_content,
    validate_word_content,
    validate_words,
)


@pytest.mark.parametrize(
    ("text", "language"),
    [
        ("Apple", "en"),
        ("don't", "en"),
        ("Яблоко", "ru"),
        ("ёж", "ru"),
        ("42", "ru"),
        ("Café", "fr"),
        ("mixed Слово", "de"),
    ],
)
def test_accepts_valid_words(text: str, language: str) -> None:
    assert check_word_content(text, language) is None
    validate_word_content(text, language)


def test_rejects_cyrillic_in_english_dictation() -> None:
    error = check_word_content("Привет", "en")

    assert isinstance(error, ContentError)
    assert error.kind is ContentErrorKind.SCRIPT_MISMATCH
    assert error.code == "script_mismatch"


def test_rejects_latin_in_russian_dictation() -> None:
    with pytest.raises(ContentError) as exc_info:
        validate_word_content("Hello", "ru")

    assert exc_info.value.kind is ContentErrorKind.SCRIPT_MISMATCH
    assert "Hello" in str(exc_info.value)


def test_length_is_checked_before_script() -> None:
    error = check_word_content("Я" * 201, "en")

    assert error is not None
    assert error.kind is ContentErrorKind.TOO_LONG


def test_two_hundred_characters_is_allowed() -> None:
    assert check_word_content("a" * 200, "en") is None


@pytest.mark.parametrize("text", ["...", "!?", "- _", "@#$"])
def test_rejects_words_without_letters_or_digits(text: str) -> None:
    error = check_word_content(text, "en")

    assert error is not None
    assert error.kind is ContentErrorKind.EMPTY_CONTENT


def test_verdict_is_deterministic() -> None:
    first = check_word_content("Hello", "ru")
    second = check_word_content("Hello", "ru")

    assert first.kind == second.kind
    assert str(first) == str(second)


def test_validate_words_stops_at_first_violation() -> None:
    with pytest.raises(ContentError) as exc_info:
        validate_words(["Apple", "Груша", "???"], "en")

    assert exc_info.value.kind is ContentErrorKind.SCRIPT_MISMATCH
    assert "Груша" in str(exc_info.value)


@pytest.mark.parametrize("text", ["҂", "҂҃", "҈҉"])
def test_cyrillic_signs_and_marks_are_not_letters(text: str) -> None:
    error = check_word_content(text, "ru")

    assert error is not None
    assert error.kind is ContentErrorKind.EMPTY_CONTENT


def test_cyrillic_sign_does_not_trip_english_script_rule() -> None:
    error = check_word_content("Apple҂", "en")

    assert error is None
