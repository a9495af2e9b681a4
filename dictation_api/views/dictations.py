"""Pydantic schemas for dictations, words and practice results."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from dictation_api.models import (
    MAX_AUDIO_URL_LENGTH,
    MAX_HINT_LENGTH,
    MAX_LANGUAGE_LENGTH,
    MAX_TITLE_LENGTH,
)
from dictation_api.services.audio_resolver import WordInput


def _strip_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip()


class WordItem(BaseModel):
    """One word in a create or update payload."""

    text: str = Field(..., min_length=1)
    hint: Optional[str] = Field(None, max_length=MAX_HINT_LENGTH)
    audioUrl: Optional[str] = Field(
        None,
        max_length=MAX_AUDIO_URL_LENGTH,
        validation_alias=AliasChoices("audioUrl", "audio_url"),
        serialization_alias="audioUrl",
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("text")
    @classmethod
    def validate_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Text is required")
        return value

    @field_validator("hint", "audioUrl")
    @classmethod
    def strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value)

    def to_input(self) -> WordInput:
        return WordInput(text=self.text, hint=self.hint, audio_url=self.audioUrl)


class CreateDictationRequest(BaseModel):
    """Payload for creating a dictation together with its words."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    language: str = Field("ru", min_length=1, max_length=MAX_LANGUAGE_LENGTH)
    description: Optional[str] = None
    isPublic: bool = Field(
        False,
        validation_alias=AliasChoices("isPublic", "is_public"),
        serialization_alias="isPublic",
    )
    words: list[WordItem] = Field(..., min_length=1)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value)


class DraftDictationRequest(BaseModel):
    """Placeholder dictation created before any word is added."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    language: str = Field("ru", min_length=1, max_length=MAX_LANGUAGE_LENGTH)
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


class UpdateDictationRequest(CreateDictationRequest):
    """Full replacement payload; omitting ``isPublic`` keeps the current flag."""

    isPublic: Optional[bool] = Field(
        None,
        validation_alias=AliasChoices("isPublic", "is_public"),
        serialization_alias="isPublic",
    )


class WordErrorItem(BaseModel):
    """A single mistake reported by the client for a practice attempt."""

    word: str
    userInput: str = Field(
        ...,
        validation_alias=AliasChoices("userInput", "user_input"),
        serialization_alias="userInput",
    )
    isCorrect: Optional[bool] = Field(
        None,
        validation_alias=AliasChoices("isCorrect", "is_correct"),
        serialization_alias="isCorrect",
    )

    model_config = ConfigDict(populate_by_name=True)


class CompleteDictationRequest(BaseModel):
    """Practice result submitted after finishing a dictation."""

    dictationId: int = Field(
        ...,
        ge=1,
        validation_alias=AliasChoices("dictationId", "dictation_id"),
        serialization_alias="dictationId",
    )
    score: float = Field(..., ge=0, le=100)
    totalWords: int = Field(
        ...,
        ge=1,
        validation_alias=AliasChoices("totalWords", "total_words"),
        serialization_alias="totalWords",
    )
    correctCount: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("correctCount", "correct_count"),
        serialization_alias="correctCount",
    )
    errors: list[WordErrorItem] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class WordResponse(BaseModel):
    """Word as returned to clients."""

    id: int
    text: str
    hint: Optional[str] = None
    audioUrl: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("audioUrl", "audio_url"),
        serialization_alias="audioUrl",
    )
    authorId: int = Field(
        ...,
        validation_alias=AliasChoices("authorId", "author_id"),
        serialization_alias="authorId",
    )
    dictationId: int = Field(
        ...,
        validation_alias=AliasChoices("dictationId", "dictation_id"),
        serialization_alias="dictationId",
    )
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class DictationResponse(BaseModel):
    """Dictation metadata, with its words when they were loaded."""

    id: int
    title: str
    language: str
    description: Optional[str] = None
    isPublic: bool = Field(
        ...,
        validation_alias=AliasChoices("isPublic", "is_public"),
        serialization_alias="isPublic",
    )
    authorId: int = Field(
        ...,
        validation_alias=AliasChoices("authorId", "author_id"),
        serialization_alias="authorId",
    )
    created_at: datetime = Field(serialization_alias="createdAt")
    words: Optional[list[WordResponse]] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PracticeResponse(BaseModel):
    """Stored practice attempt."""

    id: int
    userId: int = Field(
        ...,
        validation_alias=AliasChoices("userId", "user_id"),
        serialization_alias="userId",
    )
    dictationId: int = Field(
        ...,
        validation_alias=AliasChoices("dictationId", "dictation_id"),
        serialization_alias="dictationId",
    )
    score: float
    totalWords: int = Field(
        ...,
        validation_alias=AliasChoices("totalWords", "total_words"),
        serialization_alias="totalWords",
    )
    correctCount: int = Field(
        ...,
        validation_alias=AliasChoices("correctCount", "correct_count"),
        serialization_alias="correctCount",
    )
    errors: Optional[list[WordErrorItem]] = None
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class HistoryItem(PracticeResponse):
    """Practice attempt enriched with the dictation title."""

    dictationTitle: Optional[str] = Field(None, serialization_alias="dictationTitle")


__all__ = [
    "WordItem",
    "CreateDictationRequest",
    "DraftDictationRequest",
    "UpdateDictationRequest",
    "WordErrorItem",
    "CompleteDictationRequest",
    "WordResponse",
    "DictationResponse",
    "PracticeResponse",
    "HistoryItem",
]
