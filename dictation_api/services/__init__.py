"""Service layer: authoring pipeline and its external integrations."""

from .audio_resolver import AudioResolver, ResolvedWord, WordInput
from .authoring import AuthoringService, clean_words
from .content_validator import check_word_content, validate_word_content, validate_words
from .dictation_store import DictationStore
from .errors import (
    AccessDeniedError,
    AuthoringError,
    ContentError,
    ContentErrorKind,
    InvalidInputError,
    NotFoundError,
    StorageFailure,
)
from .speech_synthesis import (
    GoogleTranslateSynthesizer,
    PollySynthesizer,
    SpeechSynthesisError,
    SpeechSynthesizer,
    create_speech_synthesizer,
)
from .storage import (
    AudioStorage,
    LocalAudioStorage,
    EmptyAudioError,
    S3AudioStorage,
    StorageError,
    create_audio_storage,
)

__all__ = [
    "AudioResolver",
    "ResolvedWord",
    "WordInput",
    "AuthoringService",
    "clean_words",
    "check_word_content",
    "validate_word_content",
    "validate_words",
    "DictationStore",
    "AuthoringError",
    "InvalidInputError",
    "ContentError",
    "ContentErrorKind",
    "NotFoundError",
    "AccessDeniedError",
    "StorageFailure",
    "SpeechSynthesizer",
    "SpeechSynthesisError",
    "GoogleTranslateSynthesizer",
    "PollySynthesizer",
    "create_speech_synthesizer",
    "AudioStorage",
    "LocalAudioStorage",
    "S3AudioStorage",
    "StorageError",
    "EmptyAudioError",
    "create_audio_storage",
]
