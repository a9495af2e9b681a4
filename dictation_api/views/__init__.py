"""Pydantic schemas used as views in the MVC architecture."""

from .auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from .common import ErrorResponse, SuccessResponse, UploadResponse
from .dictations import (
    CompleteDictationRequest,
    CreateDictationRequest,
    DictationResponse,
    DraftDictationRequest,
    HistoryItem,
    PracticeResponse,
    UpdateDictationRequest,
    WordErrorItem,
    WordItem,
    WordResponse,
)
from .words import CreateWordRequest

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    "UserResponse",
    "ErrorResponse",
    "SuccessResponse",
    "UploadResponse",
    "WordItem",
    "WordErrorItem",
    "WordResponse",
    "CreateDictationRequest",
    "DraftDictationRequest",
    "UpdateDictationRequest",
    "CompleteDictationRequest",
    "DictationResponse",
    "PracticeResponse",
    "HistoryItem",
    "CreateWordRequest",
]
