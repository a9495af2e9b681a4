"""Authentication controller: registration, login and refresh-token rotation."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, HTTPException, Response, status
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from dictation_api.config.settings import settings
from dictation_api.controllers.dependencies import CurrentIdentityDep, SessionDep
from dictation_api.models.user import User as UserModel
from dictation_api.telemetry import increment_login
from dictation_api.utils import (
    AuthenticationError,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from dictation_api.views import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)

REFRESH_COOKIE = "refreshToken"


def _set_refresh_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        REFRESH_COOKIE,
        token,
        httponly=True,
        secure=settings.security.refresh_cookie_secure,
        max_age=settings.security.refresh_token_expires_days * 24 * 60 * 60,
        samesite="strict",
    )


def _token_response(user: UserModel, access_token: str) -> TokenResponse:
    return TokenResponse(
        access_token=access_token,
        expires_in=settings.security.access_token_expires_minutes * 60,
        user=UserResponse.model_validate(user),
    )


async def _issue_tokens(session: SessionDep, user: UserModel) -> tuple[str, str]:
    """Create a token pair and make the refresh token the only valid one."""

    access_token = create_access_token(subject=str(user.id), role=user.role.value)
    refresh_token = create_refresh_token(subject=str(user.id), role=user.role.value)
    user.refresh_token = refresh_token
    await session.commit()
    return access_token, refresh_token


@router.post(
    "/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    payload: RegisterRequest,
    response: Response,
    session: SessionDep,
) -> TokenResponse:
    result = await session.execute(
        select(UserModel).where(UserModel.email == payload.email)
    )
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists",
        )

    user = UserModel(
        email=payload.email,
        name=payload.name,
        password_hash=hash_password(payload.password),
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists",
        ) from None

    access_token, refresh_token = await _issue_tokens(session, user)
    _set_refresh_cookie(response, refresh_token)
    return _token_response(user, access_token)


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    session: SessionDep,
) -> TokenResponse:
    """Validate credentials and issue a fresh token pair."""

    result = await session.execute(
        select(UserModel).where(UserModel.email == payload.email)
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    access_token, refresh_token = await _issue_tokens(session, user)
    increment_login()

    _set_refresh_cookie(response, refresh_token)
    return _token_response(user, access_token)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    response: Response,
    session: SessionDep,
    refresh_token: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
) -> TokenResponse:
    """Rotate the refresh token.

    The stored token is swapped only if it still equals the presented one, so
    a replayed or superseded token revokes nothing and is simply refused.
    """

    def _reject(detail: str) -> HTTPException:
        # Headers on the injected response are dropped when an exception is raised.
        cleared = Response()
        cleared.delete_cookie(REFRESH_COOKIE, httponly=True, samesite="strict")
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"set-cookie": cleared.headers["set-cookie"]},
        )

    if not refresh_token:
        raise _reject("No refresh token in cookies")

    try:
        payload = decode_refresh_token(refresh_token)
        user_id = int(payload.sub)
    except (AuthenticationError, ValueError):
        raise _reject("Invalid refresh token") from None

    result = await session.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _reject("Refresh token is invalid or revoked")

    new_refresh = create_refresh_token(subject=str(user.id), role=user.role.value)
    swapped = await session.execute(
        update(UserModel)
        .where(UserModel.id == user.id, UserModel.refresh_token == refresh_token)
        .values(refresh_token=new_refresh)
        .execution_options(synchronize_session=False)
    )
    if swapped.rowcount != 1:
        await session.rollback()
        logger.warning("Rejected stale refresh token for user %s", user_id)
        raise _reject("Refresh token is invalid or revoked")
    await session.commit()

    access_token = create_access_token(subject=str(user.id), role=user.role.value)
    _set_refresh_cookie(response, new_refresh)
    return TokenResponse(
        access_token=access_token,
        expires_in=settings.security.access_token_expires_minutes * 60,
    )


@router.get("/me", response_model=UserResponse)
async def me(identity: CurrentIdentityDep, session: SessionDep) -> UserResponse:
    result = await session.execute(
        select(UserModel).where(UserModel.id == identity.user_id)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.model_validate(user)
