"""Fake transports and payload builders for exercising adapters without a network."""

import asyncio
import base64
import json
import struct
import zlib
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from relay_llm_sdk.http.transport import StreamConnection, Transport, TransportResponse


def json_response(payload: Any, status_code: int = 200) -> TransportResponse:
    """A completed response with a JSON body."""
    return TransportResponse(status_code=status_code, content=json.dumps(payload).encode("utf-8"))


def openrouter_chunk(content: Optional[str] = None, role: Optional[str] = None,
                     finish_reason: Optional[str] = None) -> str:
    delta = {}
    if role is not None:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    return json.dumps({
        "id": "gen-1",
        "model": "openai/gpt-4o-mini",
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    })


def kobold_chunk(token: str, finish_reason: Optional[str] = None) -> str:
    return json.dumps({"token": token, "finish_reason": finish_reason})


def sse_lines(*payloads: str) -> List[str]:
    """Frame payloads as ``data:`` lines separated by blank lines."""
    lines = []
    for payload in payloads:
        lines.append(f"data: {payload}")
        lines.append("")
    return lines


def openrouter_stream_lines(*pieces: str) -> List[str]:
    """OpenRouter stream: a role chunk, one chunk per piece, a finish chunk, [DONE]."""
    payloads = [openrouter_chunk(content="", role="assistant")]
    payloads += [openrouter_chunk(content=piece) for piece in pieces]
    payloads.append(openrouter_chunk(finish_reason="stop"))
    payloads.append("[DONE]")
    return sse_lines(*payloads)


def kobold_stream_lines(*tokens: str, finish_reason: str = "stop") -> List[str]:
    """KoboldCPP stream: the last token carries the finish reason."""
    lines = []
    for index, token in enumerate(tokens):
        reason = finish_reason if index == len(tokens) - 1 else None
        lines.append("event: message")
        lines.append(f"data: {kobold_chunk(token, reason)}")
        lines.append("")
    return lines


class FakeStreamConnection(StreamConnection):
    """Replays prepared lines, optionally failing after them."""

    def __init__(self, status_code: int = 200, lines: Optional[List[str]] = None,
                 error: Optional[BaseException] = None, line_delay: float = 0.0):
        self.status_code = status_code
        self.lines = list(lines or [])
        self.error = error
        self.line_delay = line_delay
        self.lines_read = 0
        self.closed = False

    async def aiter_lines(self):
        for line in self.lines:
            if self.line_delay:
                await asyncio.sleep(self.line_delay)
            self.lines_read += 1
            yield line
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


class FakeTransport(Transport):
    """
    In-memory transport.

    One-shot responses are looked up by URL suffix in ``responses``;
    every stream opened replays ``stream_lines``. All requests are
    recorded in ``requests`` for inspection.
    """

    def __init__(
        self,
        responses: Optional[Dict[str, TransportResponse]] = None,
        stream_lines: Optional[List[str]] = None,
        stream_status: int = 200,
        stream_error: Optional[BaseException] = None,
        send_error: Optional[BaseException] = None,
        open_error: Optional[BaseException] = None,
        line_delay: float = 0.0,
    ):
        self.responses = responses or {}
        self.stream_lines = stream_lines or []
        self.stream_status = stream_status
        self.stream_error = stream_error
        self.send_error = send_error
        self.open_error = open_error
        self.line_delay = line_delay
        self.requests: List[Dict[str, Any]] = []
        self.connections: List[FakeStreamConnection] = []
        self.closed = False

    def _record(self, url, method, headers, body, timeout, stream):
        self.requests.append({
            "url": url,
            "method": method,
            "headers": dict(headers),
            "body": body,
            "json": json.loads(body) if body else None,
            "timeout": timeout,
            "stream": stream,
        })

    async def send(self, url, method, headers, body=None, timeout=None) -> TransportResponse:
        self._record(url, method, headers, body, timeout, stream=False)
        if self.send_error is not None:
            raise self.send_error
        for suffix, response in self.responses.items():
            if url.endswith(suffix):
                return response
        return TransportResponse(status_code=404, content=b"")

    @asynccontextmanager
    async def open_stream(self, url, method, headers, body=None, timeout=None):
        self._record(url, method, headers, body, timeout, stream=True)
        if self.open_error is not None:
            raise self.open_error
        connection = FakeStreamConnection(
            self.stream_status,
            self.stream_lines,
            error=self.stream_error,
            line_delay=self.line_delay,
        )
        self.connections.append(connection)
        try:
            yield connection
        finally:
            await connection.aclose()

    async def aclose(self) -> None:
        self.closed = True


def _png_chunk(chunk_type: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + chunk_type + data + struct.pack(">I", crc)


def build_card_png(text_chunks: Dict[str, str]) -> bytes:
    """A minimal 1x1 PNG carrying the given ``tEXt`` chunks."""
    signature = b"\x89PNG\r\n\x1a\n"
    ihdr = _png_chunk(b"IHDR", struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0))
    texts = b"".join(
        _png_chunk(b"tEXt", key.encode("latin-1") + b"\0" + value.encode("latin-1"))
        for key, value in text_chunks.items()
    )
    idat = _png_chunk(b"IDAT", zlib.compress(b"\x00\x00\x00\x00"))
    iend = _png_chunk(b"IEND", b"")
    return signature + ihdr + texts + idat + iend


def encode_card(card: Dict[str, Any]) -> str:
    """Base64 text for a card JSON object, as stored in PNG metadata."""
    return base64.b64encode(json.dumps(card).encode("utf-8")).decode("ascii")
