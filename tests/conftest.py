"""Shared fixtures: an isolated SQLite database and fake audio collaborators."""

from __future__ import annotations

import os
from pathlib import Path
import sys
import tempfile
from typing import AsyncIterator, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Settings are read at import time, so point them at scratch locations first.
_SCRATCH = Path(tempfile.mkdtemp(prefix="dictation-tests-"))
os.environ.setdefault("DB_DSN", f"sqlite+aiosqlite:///{_SCRATCH / 'app.db'}")
os.environ.setdefault("DB_SERVERLESS", "true")
os.environ.setdefault("STORAGE_UPLOAD_DIR", str(_SCRATCH / "uploads"))
os.environ.setdefault("LOG_FILE", str(_SCRATCH / "logs" / "app.log"))
os.environ.setdefault("AUDIO_LOG_FILE", str(_SCRATCH / "logs" / "audio.log"))

from dictation_api.models import Base, User  # noqa: E402
from dictation_api.services import AudioResolver, DictationStore, EmptyAudioError  # noqa: E402
from dictation_api.services.speech_synthesis import SpeechSynthesisError  # noqa: E402
from dictation_api.utils import hash_password  # noqa: E402


class FakeSynthesizer:
    """Returns a few bytes per word, or fails for the configured texts."""

    extension = "mp3"

    def __init__(self, fail_for: Optional[set[str]] = None, fail_all: bool = False) -> None:
        self.fail_for = fail_for or set()
        self.fail_all = fail_all
        self.calls: list[tuple[str, str]] = []

    async def synthesize(self, text: str, language: str) -> AsyncIterator[bytes]:
        self.calls.append((text, language))
        if self.fail_all or text in self.fail_for:
            raise SpeechSynthesisError(f"provider unavailable for {text}")
        yield b"ID3"
        yield text.encode("utf-8")


class MemoryStorage:
    """Keeps saved payloads in a dict keyed by the returned URL."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}

    async def save(self, chunks, *, extension: str = "mp3", prefix: str = "tts") -> str:
        payload = b"".join([chunk async for chunk in chunks])
        if not payload:
            raise EmptyAudioError("Audio payload for upload was empty.")
        url = f"/uploads/{prefix}-{len(self.files) + 1}.{extension}"
        self.files[url] = payload
        return url


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def resolver(synthesizer: FakeSynthesizer, storage: MemoryStorage) -> AudioResolver:
    return AudioResolver(synthesizer, storage, timeout_seconds=2)


@pytest.fixture
def session_factory(tmp_path: Path) -> async_sessionmaker[AsyncSession]:
    """A fresh database file per test, schema created up front."""

    db_path = tmp_path / "test.db"
    schema_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(schema_engine)
    schema_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def store(session: AsyncSession) -> DictationStore:
    return DictationStore(session)


@pytest.fixture
def make_user(session: AsyncSession):
    """Insert a user and return it."""

    async def _make(email: str) -> User:
        user = User(
            email=email,
            name=email.split("@")[0],
            password_hash=hash_password("secret1"),
        )
        session.add(user)
        await session.commit()
        return user

    return _make


@pytest.fixture
def client(session_factory, resolver, storage):
    """TestClient wired to the per-test database and fake audio collaborators."""

    from fastapi.testclient import TestClient

    from dictation_api.controllers.dependencies import (
        get_audio_resolver,
        get_audio_storage,
    )
    from dictation_api.database import get_session
    from dictation_api.main import app

    async def override_get_session():
        async with session_factory() as db_session:
            yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_audio_resolver] = lambda: resolver
    app.dependency_overrides[get_audio_storage] = lambda: storage

    yield TestClient(app)

    app.dependency_overrides.clear()


def register(client, email: str, password: str = "secret1") -> dict[str, str]:
    """Register an account and return its bearer headers."""

    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": email.split("@")[0]},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}
