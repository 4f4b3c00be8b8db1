from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional

from ..config.constants import SSE_DATA_PREFIX
from ..models.events import StreamEvent


class SessionState(str, Enum):
    """Lifecycle of a streaming session."""
    IDLE = "idle"
    CONNECTING = "connecting"
    READING = "reading"
    TERMINATED = "terminated"
    DISCONNECTED = "disconnected"


EventInterpreter = Callable[[str], Optional[StreamEvent]]
"""Decodes one data payload into an event, or None for unknown shapes."""


@dataclass(frozen=True)
class PreparedRequest:
    """A fully rendered request, ready to hand to a transport.

    Attributes:
        url: Absolute endpoint URL
        method: HTTP method
        headers: Request headers
        body: Encoded JSON body, if any
        timeout: Per-request timeout in seconds
    """
    url: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    timeout: Optional[float] = None


def extract_data_payload(line: str) -> Optional[str]:
    """Return the payload of an SSE ``data:`` line, or None for other lines.

    Comments (``: keep-alive``), ``event:``/``id:`` fields and blank
    separators are not data events.
    """
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    return line[len(SSE_DATA_PREFIX):].strip()
