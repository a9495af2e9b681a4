"""Single-word endpoints for incremental authoring outside the bulk payload."""

from __future__ import annotations

from fastapi import APIRouter, status

from dictation_api.controllers.dependencies import AuthoringDep, CurrentIdentityDep
from dictation_api.views import CreateWordRequest, SuccessResponse, WordResponse

router = APIRouter(prefix="/words", tags=["words"])


@router.post("", response_model=WordResponse, status_code=status.HTTP_201_CREATED)
async def create_word(
    payload: CreateWordRequest,
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> WordResponse:
    word = await service.add_word(
        identity.user_id,
        payload.dictationId,
        payload.text,
        hint=payload.hint,
        audio_url=payload.audioUrl,
    )
    return WordResponse.model_validate(word)


@router.get("", response_model=list[WordResponse])
async def list_words(
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> list[WordResponse]:
    """List the caller's words, newest first."""

    words = await service.list_words(identity.user_id)
    return [WordResponse.model_validate(word) for word in words]


@router.delete("/{word_id}", response_model=SuccessResponse)
async def delete_word(
    word_id: int,
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> SuccessResponse:
    await service.delete_word(word_id, identity.user_id)
    return SuccessResponse(message="Word deleted successfully")
