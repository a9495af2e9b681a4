"""Resolve a playable pronunciation URL for each dictation word.

Resolution never fails the caller: a provider or storage error, or a timeout,
leaves the word without audio and the client falls back to its own speech
synthesis.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from dictation_api.config.settings import settings
from dictation_api.services.speech_synthesis import SpeechSynthesizer
from dictation_api.services.storage import AudioStorage
from dictation_api.telemetry import observe_audio_resolution

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WordInput:
    """A word as submitted by the client, after trimming."""

    text: str
    hint: Optional[str] = None
    audio_url: Optional[str] = None


@dataclass(frozen=True)
class ResolvedWord:
    """A word ready to be written, with its final audio URL (or None)."""

    text: str
    hint: Optional[str]
    audio_url: Optional[str]


class AudioResolver:
    """Trust caller URLs, otherwise synthesize and persist audio."""

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        storage: AudioStorage,
        *,
        timeout_seconds: float = settings.tts.timeout_seconds,
    ) -> None:
        self._synthesizer = synthesizer
        self._storage = storage
        self._timeout_seconds = timeout_seconds

    async def resolve(
        self,
        text: str,
        language: str,
        audio_url: Optional[str] = None,
    ) -> Optional[str]:
        """Return the caller's URL, a freshly stored one, or None on failure."""

        if audio_url:
            observe_audio_resolution("supplied")
            return audio_url

        started = time.perf_counter()
        try:
            url = await asyncio.wait_for(
                self._synthesize_and_store(text, language),
                timeout=self._timeout_seconds,
            )
        except Exception:
            logger.warning(
                "Audio resolution failed for '%s' (%s); leaving word without audio",
                text,
                language,
                exc_info=True,
            )
            observe_audio_resolution("failed")
            return None

        observe_audio_resolution("synthesized", time.perf_counter() - started)
        logger.info("Generated audio for '%s' (%s) at %s", text, language, url)
        return url

    async def _synthesize_and_store(self, text: str, language: str) -> str:
        chunks = self._synthesizer.synthesize(text, language)
        try:
            return await self._storage.save(
                chunks,
                extension=self._synthesizer.extension,
            )
        finally:
            aclose = getattr(chunks, "aclose", None)
            if aclose is not None:
                await aclose()

    async def resolve_words(
        self,
        words: Iterable[WordInput],
        language: str,
        *,
        regenerate: bool = False,
    ) -> list[ResolvedWord]:
        """Resolve each word in turn, keeping the input order.

        With ``regenerate`` the caller-supplied URLs are ignored and every word
        is synthesized again.
        """

        resolved: list[ResolvedWord] = []
        for word in words:
            supplied = None if regenerate else word.audio_url
            audio_url = await self.resolve(word.text, language, supplied)
            resolved.append(ResolvedWord(text=word.text, hint=word.hint, audio_url=audio_url))
        return resolved


__all__ = ["AudioResolver", "ResolvedWord", "WordInput"]
