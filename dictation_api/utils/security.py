"""Security helpers for password management and JWT handling."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from dictation_api.config.settings import settings

_SALT_BYTES = 16
_ITERATIONS = 120_000


def hash_password(password: str) -> str:
    """Return a salted PBKDF2 hash for the supplied password."""

    salt = os.urandom(_SALT_BYTES)
    derived = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        _ITERATIONS,
    )
    return base64.b64encode(salt + derived).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check whether the provided password matches the stored hash."""

    try:
        decoded = base64.b64decode(hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False

    salt = decoded[:_SALT_BYTES]
    stored = decoded[_SALT_BYTES:]
    candidate = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        _ITERATIONS,
    )
    return hmac.compare_digest(candidate, stored)


class AuthenticationError(Exception):
    """Raised when a JWT cannot be decoded or is otherwise invalid."""


class TokenPayload(BaseModel):
    """Minimal payload structure embedded in JWT tokens."""

    sub: str
    role: str
    exp: datetime
    iat: datetime | None = None
    jti: str | None = None


def _encode(
    subject: str,
    role: str,
    secret: str,
    expires_delta: timedelta,
    extra: Optional[dict[str, Any]] = None,
) -> str:
    now = datetime.now(timezone.utc)
    to_encode: dict[str, Any] = {
        "sub": subject,
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
    }
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, secret, algorithm=settings.security.jwt_algorithm)


def _decode(token: str, secret: str) -> TokenPayload:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.security.jwt_algorithm])
        return TokenPayload.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid authentication token") from exc


def create_access_token(
    subject: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Generate a signed short-lived access token."""

    return _encode(
        subject,
        role,
        settings.security.jwt_secret_key.get_secret_value(),
        expires_delta
        or timedelta(minutes=settings.security.access_token_expires_minutes),
    )


def create_refresh_token(
    subject: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Generate a refresh token; ``jti`` keeps consecutive tokens distinct."""

    return _encode(
        subject,
        role,
        settings.security.refresh_secret_key.get_secret_value(),
        expires_delta or timedelta(days=settings.security.refresh_token_expires_days),
        extra={"jti": uuid.uuid4().hex},
    )


def decode_access_token(token: str) -> TokenPayload:
    """Decode and validate a JWT access token, returning its payload."""

    return _decode(token, settings.security.jwt_secret_key.get_secret_value())


def decode_refresh_token(token: str) -> TokenPayload:
    """Decode and validate a refresh token, returning its payload."""

    return _decode(token, settings.security.refresh_secret_key.get_secret_value())


__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_access_token",
    "decode_refresh_token",
    "AuthenticationError",
    "TokenPayload",
]
