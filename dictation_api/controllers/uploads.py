"""Upload controller storing user-recorded pronunciation audio."""

from __future__ import annotations

from pathlib import PurePath
from typing import AsyncIterator

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from dictation_api.controllers.dependencies import AudioStorageDep, CurrentIdentityDep
from dictation_api.services import EmptyAudioError
from dictation_api.views import UploadResponse

router = APIRouter(prefix="/upload", tags=["upload"])

_ALLOWED_EXTENSIONS = {"mp3", "wav", "ogg", "webm", "m4a"}
_CHUNK_SIZE = 64 * 1024


async def _iter_upload(upload: UploadFile) -> AsyncIterator[bytes]:
    while True:
        chunk = await upload.read(_CHUNK_SIZE)
        if not chunk:
            break
        yield chunk


@router.post("", response_model=UploadResponse)
async def upload_audio(
    _identity: CurrentIdentityDep,
    storage: AudioStorageDep,
    file: UploadFile = File(...),
) -> UploadResponse:
    extension = PurePath(file.filename or "").suffix.lstrip(".").lower() or "mp3"
    if extension not in _ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type '.{extension}'",
        )

    try:
        url = await storage.save(_iter_upload(file), extension=extension, prefix="upload")
    except EmptyAudioError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        ) from exc

    return UploadResponse(url=url)
