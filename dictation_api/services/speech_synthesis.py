"""Speech-synthesis providers that turn word text into an audio byte stream."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Protocol

import httpx
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from dictation_api.config.settings import settings
from dictation_api.services.aws import create_boto3_client

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class SpeechSynthesisError(RuntimeError):
    """Raised when a provider cannot produce audio for a text."""


class SpeechSynthesizer(Protocol):
    """Anything able to stream synthesized speech for ``(text, language)``."""

    extension: str

    def synthesize(self, text: str, language: str) -> AsyncIterator[bytes]:
        ...


class GoogleTranslateSynthesizer:
    """Public translate TTS endpoint; no credentials required."""

    extension = "mp3"

    def __init__(
        self,
        *,
        host: str = settings.tts.host,
        timeout: float = settings.tts.timeout_seconds,
        slow: bool = settings.tts.slow,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = f"{host.rstrip('/')}/translate_tts"
        self._timeout = timeout
        self._slow = slow
        self._transport = transport

    def build_params(self, text: str, language: str) -> dict[str, Any]:
        return {
            "ie": "UTF-8",
            "q": text,
            "tl": language,
            "total": 1,
            "idx": 0,
            "textlen": len(text),
            "client": "tw-ob",
            "prev": "input",
            "ttsspeed": 0.24 if self._slow else 1,
        }

    async def synthesize(self, text: str, language: str) -> AsyncIterator[bytes]:
        params = self.build_params(text, language)
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            async with client.stream("GET", self._endpoint, params=params) as response:
                if response.status_code != httpx.codes.OK:
                    raise SpeechSynthesisError(
                        f"TTS endpoint answered {response.status_code} for '{text}'"
                    )
                async for chunk in response.aiter_bytes():
                    if chunk:
                        yield chunk


class PollySynthesizer:
    """Amazon Polly backend, one voice per dictation language."""

    extension = "mp3"

    def __init__(self, client: Any | None = None) -> None:
        self._client = client or create_boto3_client(
            "polly", region_name=settings.polly.region
        )
        self._voices = dict(settings.polly.voices)
        self._default_voice_id = settings.polly.default_voice_id

    async def synthesize(self, text: str, language: str) -> AsyncIterator[bytes]:
        voice_id = self._voices.get(language, self._default_voice_id)
        try:
            response: dict[str, Any] = await run_in_threadpool(
                self._client.synthesize_speech,
                Text=text,
                VoiceId=voice_id,
                Engine=settings.polly.engine,
                OutputFormat="mp3",
            )
        except (BotoCoreError, ClientError) as exc:
            raise SpeechSynthesisError(f"Polly synthesis failed: {exc}") from exc

        audio_stream = response.get("AudioStream")
        if audio_stream is None:
            raise SpeechSynthesisError("Polly returned no audio stream.")

        try:
            while True:
                chunk = await run_in_threadpool(audio_stream.read, _CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
        finally:
            audio_stream.close()


def create_speech_synthesizer() -> SpeechSynthesizer:
    """Build the provider selected by ``TTS_PROVIDER``."""

    if settings.tts.provider == "polly":
        return PollySynthesizer()
    return GoogleTranslateSynthesizer()


__all__ = [
    "SpeechSynthesizer",
    "SpeechSynthesisError",
    "GoogleTranslateSynthesizer",
    "PollySynthesizer",
    "create_speech_synthesizer",
]
