"""Streaming layer for real-time LLM responses.

This layer handles:
- Reading server-sent event lines from an open connection
- Reducing provider events into accumulated response fragments
- Termination, disconnect and backpressure semantics
"""

from .session import StreamSession
from .types import EventInterpreter, PreparedRequest, SessionState, extract_data_payload

__all__ = [
    "StreamSession",
    "EventInterpreter",
    "PreparedRequest",
    "SessionState",
    "extract_data_payload",
]
