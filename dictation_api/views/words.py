"""Schemas for the single-word endpoints."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from dictation_api.views.dictations import WordItem


class CreateWordRequest(WordItem):
    """A word appended to an existing dictation."""

    dictationId: int = Field(
        ...,
        ge=1,
        validation_alias=AliasChoices("dictationId", "dictation_id"),
        serialization_alias="dictationId",
    )


__all__ = ["CreateWordRequest"]
