"""Data models for Relay LLM SDK."""

from .character import CharacterCard, CharacterCardData
from .conversation_types import ChatMessage, MessageRole
from .events import ContentDelta, StreamEvent, StreamTermination
from .generation import (
    BackendType,
    GenerationConfig,
    ReasoningEffort,
    UnifiedResponse,
)
from .streaming import StreamingOptions

__all__ = [
    # Generation models
    "BackendType",
    "GenerationConfig",
    "ReasoningEffort",
    "UnifiedResponse",

    # Conversation models
    "ChatMessage",
    "MessageRole",

    # Streaming
    "ContentDelta",
    "StreamEvent",
    "StreamTermination",
    "StreamingOptions",

    # Character cards
    "CharacterCard",
    "CharacterCardData",
]
