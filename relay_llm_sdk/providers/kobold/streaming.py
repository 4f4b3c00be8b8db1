from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from ...config.constants import KOBOLD_FINISH_REASONS
from ...models.events import ContentDelta, StreamEvent, StreamTermination
from .parsers import KoboldStreamChunk


def interpret_kobold_event(payload: str) -> Optional[StreamEvent]:
    """Decode one KoboldCPP ``data:`` payload.

    A ``finish_reason`` of ``stop`` or ``length`` ends the stream and
    its token is the last piece of text. Anything that is not a token
    chunk decodes to None.
    """
    try:
        chunk = KoboldStreamChunk.model_validate_json(payload)
    except ValidationError:
        return None

    if chunk.finish_reason in KOBOLD_FINISH_REASONS:
        return StreamTermination(finish_reason=chunk.finish_reason, text=chunk.token, raw=chunk)
    return ContentDelta(text=chunk.token, raw=chunk)
