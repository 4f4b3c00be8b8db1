"""Response models for the KoboldCPP API."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from ...models.generation import UnifiedResponse


class KoboldResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: Optional[str] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    finish_reason: Optional[str] = None


class KoboldGenerateResponse(BaseModel):
    """Body of POST /api/v1/generate."""
    model_config = ConfigDict(extra="allow")

    results: List[KoboldResult]


class KoboldStreamChunk(BaseModel):
    """One ``data:`` payload of /api/extra/generate/stream."""
    model_config = ConfigDict(extra="allow")

    token: str
    finish_reason: Optional[str] = None


class KoboldValueResponse(BaseModel):
    value: int


class KoboldResultResponse(BaseModel):
    result: str


class KoboldTokenCountResponse(BaseModel):
    value: int
    ids: List[int] = []


def to_unified_response(response: KoboldGenerateResponse) -> UnifiedResponse:
    """Reduce a generate response to a UnifiedResponse using the first result."""
    result = response.results[0] if response.results else None
    return UnifiedResponse(
        role="assistant",
        text=result.text if result else None,
        completion_tokens=result.completion_tokens if result else None,
        prompt_tokens=result.prompt_tokens if result else None,
        streaming=False,
        raw_response=response,
    )
