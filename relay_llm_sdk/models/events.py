"""Event models for streaming responses.

Each data line of a provider event stream decodes to at most one of
these events. Events are backend-neutral; the provider adapter builds
them and the streaming session reduces them into ``UnifiedResponse``
fragments.
"""

from typing import Any, Optional, Union
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ContentDelta:
    """An incremental piece of generated text."""
    text: str = ""
    role: Optional[str] = None
    raw: Any = field(default=None, repr=False)


@dataclass(frozen=True)
class StreamTermination:
    """End of the stream.

    ``text`` carries any trailing content delivered together with the
    finish signal (the local backend sends its last token this way).
    """
    finish_reason: Optional[str] = None
    text: str = ""
    raw: Any = field(default=None, repr=False)


StreamEvent = Union[ContentDelta, StreamTermination]
