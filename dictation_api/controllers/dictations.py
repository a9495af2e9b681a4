"""Dictation controller: authoring, practice results and read projections."""

from __future__ import annotations

from fastapi import APIRouter, status

from dictation_api.controllers.dependencies import AuthoringDep, CurrentIdentityDep
from dictation_api.views import (
    CompleteDictationRequest,
    CreateDictationRequest,
    DictationResponse,
    DraftDictationRequest,
    HistoryItem,
    PracticeResponse,
    SuccessResponse,
    UpdateDictationRequest,
)

router = APIRouter(prefix="/dictations", tags=["dictations"])


@router.post(
    "", response_model=DictationResponse, status_code=status.HTTP_201_CREATED
)
async def create_dictation(
    payload: CreateDictationRequest,
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> DictationResponse:
    """Create a dictation with its full word set."""

    dictation = await service.create_with_words(
        identity.user_id,
        payload.title,
        payload.language,
        [word.to_input() for word in payload.words],
        is_public=payload.isPublic,
        description=payload.description,
    )
    return DictationResponse.model_validate(dictation)


@router.post(
    "/draft", response_model=DictationResponse, status_code=status.HTTP_201_CREATED
)
async def create_draft(
    payload: DraftDictationRequest,
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> DictationResponse:
    dictation = await service.create_dictation(
        identity.user_id,
        payload.title,
        payload.language,
        payload.description,
    )
    return DictationResponse.model_validate(dictation)


@router.post(
    "/complete", response_model=PracticeResponse, status_code=status.HTTP_201_CREATED
)
async def complete_dictation(
    payload: CompleteDictationRequest,
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> PracticeResponse:
    """Record the result of a practice attempt."""

    practice = await service.save_practice(
        identity.user_id,
        payload.dictationId,
        payload.score,
        payload.totalWords,
        payload.correctCount,
        [error.model_dump(by_alias=True) for error in payload.errors],
    )
    return PracticeResponse.model_validate(practice)


@router.get("", response_model=list[DictationResponse])
async def list_own_dictations(
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> list[DictationResponse]:
    dictations = await service.get_all(identity.user_id)
    return [DictationResponse.model_validate(item) for item in dictations]


@router.get("/public", response_model=list[DictationResponse])
async def list_public_dictations(
    _identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> list[DictationResponse]:
    dictations = await service.get_public()
    return [DictationResponse.model_validate(item) for item in dictations]


@router.get("/history", response_model=list[HistoryItem])
async def practice_history(
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> list[HistoryItem]:
    practices = await service.get_history(identity.user_id)
    return [
        HistoryItem.model_validate(practice).model_copy(
            update={"dictationTitle": practice.dictation.title}
        )
        for practice in practices
    ]


@router.get("/{dictation_id}", response_model=DictationResponse)
async def get_dictation(
    dictation_id: int,
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> DictationResponse:
    dictation = await service.get_one(dictation_id, identity.user_id)
    return DictationResponse.model_validate(dictation)


@router.patch("/{dictation_id}", response_model=DictationResponse)
async def update_dictation(
    dictation_id: int,
    payload: UpdateDictationRequest,
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> DictationResponse:
    """Replace the dictation's metadata and its entire word list."""

    dictation = await service.update_full_dictation(
        dictation_id,
        identity.user_id,
        payload.title,
        payload.description,
        payload.language,
        [word.to_input() for word in payload.words],
        is_public=payload.isPublic,
    )
    return DictationResponse.model_validate(dictation)


@router.delete("/{dictation_id}", response_model=SuccessResponse)
async def delete_dictation(
    dictation_id: int,
    identity: CurrentIdentityDep,
    service: AuthoringDep,
) -> SuccessResponse:
    await service.delete_dictation(dictation_id, identity.user_id)
    return SuccessResponse(
        message="Dictation and all related words deleted successfully."
    )
