"""
Relay LLM SDK - one request/response contract for OpenRouter and KoboldCPP.

This package lets an application talk to two text-generation backends
through a single interface:
- OpenRouter (cloud chat-completion API)
- KoboldCPP (local generation server)

Features:
- One GenerationConfig rendered into each backend's wire format
- One-shot and streamed generation with accumulated-text fragments
- A typed error taxonomy shared by both backends
- Character card import from PNG metadata
"""

__version__ = "0.1.0"

from .api.client import RelayLLMClient
from .errors import (
    DecodingError,
    ErrorKind,
    InvalidDataError,
    InvalidResponseError,
    InvalidServiceError,
    InvalidURLError,
    ProviderError,
    RequestTimeoutError,
    ServerError,
    UnsupportedImportError,
)
from .importers import ChubImporter, CharacterCardError, read_character_card
from .models.character import CharacterCard, CharacterCardData
from .models.conversation_types import ChatMessage, MessageRole
from .models.generation import BackendType, GenerationConfig, ReasoningEffort, UnifiedResponse
from .models.streaming import StreamingOptions
from .providers import KoboldProvider, OpenRouterProvider, ProviderAdapter
from .streaming import SessionState, StreamSession

__all__ = [
    # Main client
    "RelayLLMClient",

    # Providers
    "ProviderAdapter",
    "OpenRouterProvider",
    "KoboldProvider",

    # Models
    "BackendType",
    "GenerationConfig",
    "ReasoningEffort",
    "UnifiedResponse",
    "ChatMessage",
    "MessageRole",
    "StreamingOptions",
    "CharacterCard",
    "CharacterCardData",

    # Streaming
    "StreamSession",
    "SessionState",

    # Errors
    "ProviderError",
    "ErrorKind",
    "InvalidURLError",
    "InvalidResponseError",
    "InvalidDataError",
    "DecodingError",
    "RequestTimeoutError",
    "ServerError",
    "InvalidServiceError",
    "UnsupportedImportError",
    "CharacterCardError",

    # Importers
    "ChubImporter",
    "read_character_card",
]
