from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional, Sequence, Tuple, Union
from enum import Enum

from .character import CharacterCard
from .conversation_types import ChatMessage
from ..config.constants import (
    DEFAULT_CHAT_STOP,
    DEFAULT_KOBOLD_STOP,
    DEFAULT_MAX_CONTEXT_LENGTH,
    DEFAULT_MAX_LENGTH,
    DEFAULT_MIN_P,
    DEFAULT_MODEL,
    DEFAULT_REPETITION_PENALTY,
    DEFAULT_REPETITION_RANGE,
    DEFAULT_REPETITION_SLOPE,
    DEFAULT_SAMPLER_ORDER,
    DEFAULT_TEMPERATURE,
    DEFAULT_TFS,
    DEFAULT_TOP_A,
    DEFAULT_TOP_K,
    DEFAULT_TOP_P,
    DEFAULT_TYPICAL,
)


class BackendType(str, Enum):
    """Supported generation backends."""
    OPENROUTER = "openrouter"
    KOBOLD = "kobold"


class ReasoningEffort(str, Enum):
    """Reasoning effort levels for the chat-completion backend."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


MessageInput = Union[ChatMessage, dict]


class GenerationConfig(BaseModel):
    """
    Backend-independent generation configuration.

    One config describes a single generation call. The provider adapter
    decides whether ``messages`` or ``prompt`` is authoritative for its
    backend and renders the provider-specific request body from it.

    Numeric ranges are deliberately not validated here: out-of-range
    values are forwarded and rejected (if at all) by the server.
    The model is frozen once built and its sequences are tuples; use
    ``model_copy(update=...)`` to derive a variant.
    """

    model_config = ConfigDict(frozen=True)

    # Input
    model: str = Field(default=DEFAULT_MODEL, description="Model identifier")
    messages: Tuple[ChatMessage, ...] = Field(default=(), description="Ordered chat messages")
    prompt: Optional[str] = Field(None, description="Pre-templated raw prompt")
    memory: Optional[str] = Field(None, description="Caller-supplied memory block")

    # Sampling
    temperature: Optional[float] = DEFAULT_TEMPERATURE
    top_p: Optional[float] = DEFAULT_TOP_P
    top_k: Optional[int] = DEFAULT_TOP_K
    top_a: Optional[float] = DEFAULT_TOP_A
    min_p: Optional[float] = DEFAULT_MIN_P
    typical: Optional[float] = DEFAULT_TYPICAL
    tfs: Optional[float] = DEFAULT_TFS
    repetition_penalty: Optional[float] = DEFAULT_REPETITION_PENALTY
    repetition_range: Optional[int] = DEFAULT_REPETITION_RANGE
    repetition_slope: Optional[float] = DEFAULT_REPETITION_SLOPE
    frequency_penalty: Optional[float] = 0.0
    presence_penalty: Optional[float] = 0.0
    seed: Optional[int] = None

    # Length and stopping
    stop: Optional[Tuple[str, ...]] = DEFAULT_CHAT_STOP
    max_length: Optional[int] = Field(DEFAULT_MAX_LENGTH, description="Maximum tokens to generate")
    max_context_length: Optional[int] = DEFAULT_MAX_CONTEXT_LENGTH
    trim_stop: Optional[bool] = True
    sampler_order: Optional[Tuple[int, ...]] = DEFAULT_SAMPLER_ORDER

    # Reasoning (chat-completion backend only)
    reasoning_effort: Optional[ReasoningEffort] = ReasoningEffort.MEDIUM
    exclude_reasoning: Optional[bool] = True

    # Character context
    prompt_template: Optional[str] = None
    character_description: Optional[str] = None
    character_personality: Optional[str] = None
    character_scenario: Optional[str] = None

    @classmethod
    def for_openrouter(
        cls,
        model: str,
        messages: Sequence[MessageInput] = (),
        **kwargs: Any,
    ) -> "GenerationConfig":
        """Build a config for the chat-completion backend."""
        return cls(model=model, messages=tuple(messages), **kwargs)

    @classmethod
    def for_kobold(
        cls,
        prompt: str,
        memory: Optional[str] = None,
        **kwargs: Any,
    ) -> "GenerationConfig":
        """Build a config for the local generation backend."""
        kwargs.setdefault("stop", DEFAULT_KOBOLD_STOP)
        kwargs.setdefault("model", "")
        return cls(prompt=prompt, memory=memory, **kwargs)

    def character_context(self) -> List[str]:
        """Template and character fields in fixed order, empty ones dropped."""
        parts = [
            self.prompt_template,
            self.character_description,
            self.character_personality,
            self.character_scenario,
        ]
        return [part for part in parts if part]

    def with_character(self, card: CharacterCard) -> "GenerationConfig":
        """Return a copy carrying the character card's context fields."""
        return self.model_copy(update=card.context_fields())


class UnifiedResponse(BaseModel):
    """
    Backend-independent response.

    For streamed calls ``text`` is always the full text accumulated so far,
    never a diff. ``streaming`` is true for every fragment except the
    terminal one; ``disconnect`` is true only for a snapshot describing an
    abnormally ended stream.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    role: Optional[str] = "assistant"
    text: Optional[str] = None
    completion_tokens: Optional[int] = None
    prompt_tokens: Optional[int] = None
    streaming: bool = False
    disconnect: bool = False
    raw_response: Any = Field(None, repr=False)
