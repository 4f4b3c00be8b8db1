"""HTTP transport layer for Relay LLM SDK.

Adapters depend on the ``Transport`` interface; ``HttpxTransport`` is the
default implementation. Tests and embedding applications can supply their
own transport (or an ``httpx.AsyncClient`` with a mock transport).
"""

from .transport import (
    HttpxStreamConnection,
    HttpxTransport,
    StreamConnection,
    Transport,
    TransportResponse,
)

__all__ = [
    "HttpxStreamConnection",
    "HttpxTransport",
    "StreamConnection",
    "Transport",
    "TransportResponse",
]
