"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from dictation_api.database import get_session
from dictation_api.services import (
    AudioResolver,
    AudioStorage,
    AuthoringService,
    DictationStore,
    create_audio_storage,
    create_speech_synthesizer,
)
from dictation_api.utils import AuthenticationError, decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")
SessionDep = Annotated[AsyncSession, Depends(get_session)]


@dataclass(frozen=True)
class Identity:
    """Caller identity taken from a verified access token."""

    user_id: int
    role: str


async def get_current_identity(
    request: Request,
    token: Annotated[str, Depends(oauth2_scheme)],
) -> Identity:
    """Verify the bearer token; the user row itself is not re-read."""

    try:
        payload = decode_access_token(token)
        identity = Identity(user_id=int(payload.sub), role=payload.role)
    except (AuthenticationError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired access token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    request.state.user = {"id": identity.user_id, "role": identity.role}
    return identity


CurrentIdentityDep = Annotated[Identity, Depends(get_current_identity)]


_audio_storage: AudioStorage | None = None
_audio_resolver: AudioResolver | None = None


def get_audio_storage() -> AudioStorage:
    """Return the process-wide audio storage backend."""

    global _audio_storage
    if _audio_storage is None:
        _audio_storage = create_audio_storage()
    return _audio_storage


def get_audio_resolver() -> AudioResolver:
    """Return the process-wide audio resolver."""

    global _audio_resolver
    if _audio_resolver is None:
        _audio_resolver = AudioResolver(create_speech_synthesizer(), get_audio_storage())
    return _audio_resolver


def get_dictation_store(session: SessionDep) -> DictationStore:
    return DictationStore(session)


def get_authoring_service(
    store: Annotated[DictationStore, Depends(get_dictation_store)],
    resolver: Annotated[AudioResolver, Depends(get_audio_resolver)],
) -> AuthoringService:
    return AuthoringService(store, resolver)


AudioStorageDep = Annotated[AudioStorage, Depends(get_audio_storage)]
AuthoringDep = Annotated[AuthoringService, Depends(get_authoring_service)]


__all__ = [
    "Identity",
    "get_current_identity",
    "get_audio_storage",
    "get_audio_resolver",
    "get_dictation_store",
    "get_authoring_service",
    "oauth2_scheme",
    "SessionDep",
    "CurrentIdentityDep",
    "AudioStorageDep",
    "AuthoringDep",
]
