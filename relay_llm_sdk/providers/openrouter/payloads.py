"""Request body models and builder for the OpenRouter chat-completion API."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from ...models.conversation_types import MessageRole
from ...models.generation import GenerationConfig, ReasoningEffort


class OpenRouterMessage(BaseModel):
    role: str
    content: str


class OpenRouterReasoning(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    effort: Optional[ReasoningEffort] = None
    max_tokens: Optional[int] = None
    exclude: Optional[bool] = None


class OpenRouterRequestBody(BaseModel):
    """POST /chat/completions body. Keys are the wire names."""

    model_config = ConfigDict(use_enum_values=True)

    model: str
    messages: List[OpenRouterMessage]
    stop: Optional[List[str]] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    top_a: Optional[float] = None
    min_p: Optional[float] = None
    max_tokens: Optional[int] = None
    repetition_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    seed: Optional[int] = None
    stream: Optional[bool] = None
    reasoning: Optional[OpenRouterReasoning] = None


def build_system_messages(config: GenerationConfig) -> List[OpenRouterMessage]:
    """Template, description, personality, scenario as system messages, skipping empty ones."""
    return [
        OpenRouterMessage(role=MessageRole.SYSTEM.value, content=part)
        for part in config.character_context()
    ]


def build_chat_messages(config: GenerationConfig) -> List[OpenRouterMessage]:
    """Caller messages 1:1, or the raw prompt as one user message when there are none."""
    if not config.messages and config.prompt:
        return [OpenRouterMessage(role=MessageRole.USER.value, content=config.prompt)]
    return [
        OpenRouterMessage(role=_role_value(message.role), content=message.content)
        for message in config.messages
    ]


def build_openrouter_body(config: GenerationConfig, stream: bool = False) -> OpenRouterRequestBody:
    """
    Render a GenerationConfig as an OpenRouter request body.

    Sampling parameters pass through unchanged. ``stream`` is only set
    for streamed calls so one-shot bodies omit the key entirely.
    """
    reasoning = None
    if config.reasoning_effort is not None or config.exclude_reasoning is not None:
        reasoning = OpenRouterReasoning(
            effort=config.reasoning_effort,
            exclude=config.exclude_reasoning,
        )

    return OpenRouterRequestBody(
        model=config.model,
        messages=build_system_messages(config) + build_chat_messages(config),
        stop=config.stop,
        temperature=config.temperature,
        top_p=config.top_p,
        top_k=config.top_k,
        top_a=config.top_a,
        min_p=config.min_p,
        max_tokens=config.max_length,
        repetition_penalty=config.repetition_penalty,
        presence_penalty=config.presence_penalty,
        frequency_penalty=config.frequency_penalty,
        seed=config.seed,
        stream=True if stream else None,
        reasoning=reasoning,
    )


def _role_value(role) -> str:
    return role.value if isinstance(role, MessageRole) else str(role)
