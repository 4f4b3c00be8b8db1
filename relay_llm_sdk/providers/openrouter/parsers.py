"""Response models for the OpenRouter API and their reduction to UnifiedResponse."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from ...models.generation import UnifiedResponse


class _OpenModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class OpenRouterUsage(_OpenModel):
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


class OpenRouterResponseMessage(_OpenModel):
    role: Optional[str] = None
    content: Optional[str] = None
    refusal: Optional[Any] = None
    reasoning: Optional[str] = None


class OpenRouterChoice(_OpenModel):
    finish_reason: Optional[str] = None
    native_finish_reason: Optional[str] = None
    index: Optional[int] = None
    message: Optional[OpenRouterResponseMessage] = None


class OpenRouterChatResponse(_OpenModel):
    """Body of a non-streamed /chat/completions response."""
    id: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    system_fingerprint: Optional[str] = None
    usage: Optional[OpenRouterUsage] = None
    choices: Optional[List[OpenRouterChoice]] = None


class OpenRouterDelta(_OpenModel):
    role: Optional[str] = None
    content: Optional[str] = None


class OpenRouterStreamChoice(_OpenModel):
    delta: Optional[OpenRouterDelta] = None
    finish_reason: Optional[str] = None
    index: Optional[int] = None


class OpenRouterStreamChunk(_OpenModel):
    """One JSON chunk of a streamed /chat/completions response."""
    id: Optional[str] = None
    model: Optional[str] = None
    choices: List[OpenRouterStreamChoice]


class OpenRouterKeyData(_OpenModel):
    label: Optional[str] = None
    usage: Optional[float] = None
    limit: Optional[float] = None
    limit_remaining: Optional[float] = None
    is_free_tier: Optional[bool] = None
    is_provisioning_key: Optional[bool] = None


class OpenRouterKeyResponse(_OpenModel):
    """Body of GET /key."""
    data: Optional[OpenRouterKeyData] = None


class OpenRouterArchitecture(_OpenModel):
    input_modalities: List[str] = []
    output_modalities: List[str] = []
    tokenizer: Optional[str] = None
    instruct_type: Optional[str] = None


class OpenRouterTopProvider(_OpenModel):
    is_moderated: Optional[bool] = None
    context_length: Optional[float] = None
    max_completion_tokens: Optional[float] = None


class OpenRouterPricing(_OpenModel):
    prompt: Optional[str] = None
    completion: Optional[str] = None
    image: Optional[str] = None
    request: Optional[str] = None
    input_cache_read: Optional[str] = None
    input_cache_write: Optional[str] = None
    web_search: Optional[str] = None
    internal_reasoning: Optional[str] = None


class OpenRouterModel(_OpenModel):
    """One entry of the GET /models catalog."""
    id: str
    name: Optional[str] = None
    created: Optional[float] = None
    description: Optional[str] = None
    context_length: Optional[float] = None
    architecture: Optional[OpenRouterArchitecture] = None
    top_provider: Optional[OpenRouterTopProvider] = None
    pricing: Optional[OpenRouterPricing] = None
    per_request_limits: Optional[Any] = None


class OpenRouterModelList(_OpenModel):
    """Body of GET /models."""
    data: List[OpenRouterModel]


def to_unified_response(response: OpenRouterChatResponse) -> UnifiedResponse:
    """Reduce a full chat response to a UnifiedResponse using the first choice."""
    choice = response.choices[0] if response.choices else None
    message = choice.message if choice else None
    usage = response.usage

    return UnifiedResponse(
        role=(message.role if message and message.role else "assistant"),
        text=message.content if message else None,
        completion_tokens=usage.completion_tokens if usage else None,
        prompt_tokens=usage.prompt_tokens if usage else None,
        streaming=False,
        raw_response=response,
    )
