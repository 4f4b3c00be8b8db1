from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from ...config.constants import OPENROUTER_DONE_SENTINEL
from ...models.events import ContentDelta, StreamEvent, StreamTermination
from .parsers import OpenRouterStreamChunk


def interpret_openrouter_event(payload: str) -> Optional[StreamEvent]:
    """Decode one OpenRouter ``data:`` payload.

    ``[DONE]`` ends the stream. A per-choice ``finish_reason`` does not:
    OpenRouter still sends ``[DONE]`` after it. Payloads that are not a
    chunk (comments, provider keep-alives) decode to None.
    """
    if payload == OPENROUTER_DONE_SENTINEL:
        return StreamTermination(finish_reason="done")

    try:
        chunk = OpenRouterStreamChunk.model_validate_json(payload)
    except ValidationError:
        return None

    if not chunk.choices:
        return ContentDelta(raw=chunk)
    delta = chunk.choices[0].delta
    if delta is None:
        return ContentDelta(raw=chunk)
    return ContentDelta(text=delta.content or "", role=delta.role, raw=chunk)
