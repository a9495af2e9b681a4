"""Durable storage for word pronunciation audio and user uploads."""

from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path
from typing import Any, AsyncIterable, Protocol

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from dictation_api.config.settings import settings
from dictation_api.services.aws import create_boto3_client

logger = logging.getLogger(__name__)

_CONTENT_TYPES = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "webm": "audio/webm",
    "m4a": "audio/mp4",
}


class StorageError(RuntimeError):
    """Raised when audio persistence fails."""


class EmptyAudioError(StorageError):
    """Raised when there is nothing to store."""


class AudioStorage(Protocol):
    """Persist a byte stream and return a URL the read paths can serve."""

    async def save(
        self,
        chunks: AsyncIterable[bytes],
        *,
        extension: str = "mp3",
        prefix: str = "tts",
    ) -> str:
        ...


def generate_file_name(extension: str, prefix: str = "tts") -> str:
    """Return ``<prefix>-<epoch ms>-<random hex>.<ext>``, safe under concurrency."""

    millis = int(time.time() * 1000)
    return f"{prefix}-{millis}-{secrets.token_hex(6)}.{extension.lstrip('.')}"


class LocalAudioStorage:
    """Writes files below a directory that is served under ``url_prefix``."""

    def __init__(
        self,
        directory: str | Path = settings.storage.upload_dir,
        *,
        url_prefix: str = settings.storage.url_prefix,
    ) -> None:
        self._directory = Path(directory)
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def directory(self) -> Path:
        return self._directory

    async def save(
        self,
        chunks: AsyncIterable[bytes],
        *,
        extension: str = "mp3",
        prefix: str = "tts",
    ) -> str:
        file_name = generate_file_name(extension, prefix)
        file_path = self._directory / file_name

        try:
            await run_in_threadpool(self._directory.mkdir, parents=True, exist_ok=True)
            handle = await run_in_threadpool(file_path.open, "wb")
        except OSError as exc:
            raise StorageError(f"Cannot open {file_path} for writing: {exc}") from exc

        written = 0
        completed = False
        try:
            async for chunk in chunks:
                await run_in_threadpool(handle.write, chunk)
                written += len(chunk)
            completed = True
        except OSError as exc:
            raise StorageError(f"Failed to write {file_path}: {exc}") from exc
        finally:
            await run_in_threadpool(handle.close)
            if not completed or written == 0:
                await run_in_threadpool(file_path.unlink, missing_ok=True)

        if written == 0:
            raise EmptyAudioError("Audio payload for upload was empty.")

        logger.debug("Stored %d bytes at %s", written, file_path)
        return f"{self._url_prefix}/{file_name}"


class S3AudioStorage:
    """Uploads audio objects to the configured S3 bucket."""

    def __init__(self, client: Any | None = None) -> None:
        self._client = client or create_boto3_client("s3", region_name=settings.s3.region)

    @staticmethod
    def _object_url(bucket: str, key: str) -> str:
        region = settings.s3.region
        if region == "us-east-1":
            return f"https://{bucket}.s3.amazonaws.com/{key}"
        return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"

    async def save(
        self,
        chunks: AsyncIterable[bytes],
        *,
        extension: str = "mp3",
        prefix: str = "tts",
    ) -> str:
        bucket = settings.s3.bucket_name
        if not bucket:
            raise StorageError("S3 bucket name is not configured.")

        payload = bytearray()
        async for chunk in chunks:
            payload.extend(chunk)
        if not payload:
            raise EmptyAudioError("Audio payload for upload was empty.")

        extension = extension.lstrip(".")
        object_key = f"{settings.s3.key_prefix}/{generate_file_name(extension, prefix)}"
        try:
            await run_in_threadpool(
                self._client.put_object,
                Bucket=bucket,
                Key=object_key,
                Body=bytes(payload),
                ContentType=_CONTENT_TYPES.get(extension, "application/octet-stream"),
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload audio: {exc}") from exc

        return self._object_url(bucket, object_key)


def create_audio_storage() -> AudioStorage:
    """Build the backend selected by ``STORAGE_BACKEND``."""

    if settings.storage.backend == "s3":
        return S3AudioStorage()
    return LocalAudioStorage()


__all__ = [
    "AudioStorage",
    "LocalAudioStorage",
    "S3AudioStorage",
    "StorageError",
    "EmptyAudioError",
    "create_audio_storage",
    "generate_file_name",
]
