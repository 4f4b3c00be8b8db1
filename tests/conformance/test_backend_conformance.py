"""Behavior both backends must share behind the same contract."""

import httpx
import pytest

from helpers.streaming_mocks import (
    FakeTransport,
    json_response,
    kobold_stream_lines,
    openrouter_stream_lines,
)
from relay_llm_sdk.errors import InvalidDataError, RequestTimeoutError, ServerError
from relay_llm_sdk.models.conversation_types import ChatMessage
from relay_llm_sdk.models.generation import GenerationConfig, UnifiedResponse
from relay_llm_sdk.providers.kobold import KoboldProvider
from relay_llm_sdk.providers.openrouter import OpenRouterProvider
from relay_llm_sdk.streaming.types import SessionState

BACKENDS = ["openrouter", "kobold"]


def make_provider(backend, **transport_kwargs):
    transport = FakeTransport(**transport_kwargs)
    if backend == "openrouter":
        return OpenRouterProvider(api_key="k", transport=transport), transport
    return KoboldProvider(transport=transport), transport


def make_config(backend):
    if backend == "openrouter":
        return GenerationConfig.for_openrouter("openai/gpt-4o-mini", [ChatMessage.user("hi")])
    return GenerationConfig.for_kobold("User: hi\nBot:")


def stream_lines(backend, *pieces):
    if backend == "openrouter":
        return openrouter_stream_lines(*pieces)
    return kobold_stream_lines(*pieces)


@pytest.mark.conformance
@pytest.mark.parametrize("backend", BACKENDS)
class TestBackendConformance:

    @pytest.mark.asyncio
    async def test_stream_reduces_to_one_terminal(self, backend):
        pieces = ["The", " quick", " brown", " fox"]
        provider, transport = make_provider(backend, stream_lines=stream_lines(backend, *pieces))

        session = provider.stream(make_config(backend))
        fragments = [fragment async for fragment in session]

        terminal = [f for f in fragments if not f.streaming]
        assert len(terminal) == 1
        assert fragments[-1] is terminal[0]
        assert terminal[0].text == "The quick brown fox"
        assert all(isinstance(f, UnifiedResponse) for f in fragments)
        assert all(f.role == "assistant" for f in fragments)
        texts = [f.text for f in fragments]
        assert all(later.startswith(earlier) for earlier, later in zip(texts, texts[1:]))
        assert session.state == SessionState.TERMINATED
        assert transport.connections[0].closed

    @pytest.mark.asyncio
    async def test_stream_server_error(self, backend):
        provider, _ = make_provider(backend, stream_status=500)

        with pytest.raises(ServerError) as exc_info:
            [fragment async for fragment in provider.stream(make_config(backend))]
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_stream_timeout(self, backend):
        provider, _ = make_provider(backend, open_error=httpx.ConnectTimeout("connect"))

        with pytest.raises(RequestTimeoutError) as exc_info:
            [fragment async for fragment in provider.stream(make_config(backend))]
        assert exc_info.value.partial.disconnect is True

    @pytest.mark.asyncio
    async def test_stream_without_terminal_signal(self, backend):
        provider, _ = make_provider(backend, stream_lines=["data: {}", ""])

        session = provider.stream(make_config(backend))
        with pytest.raises(InvalidDataError):
            [fragment async for fragment in session]
        assert session.skipped_lines == 1
        assert session.state == SessionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_one_shot_server_error(self, backend):
        provider, transport = make_provider(backend)
        transport.responses = {provider.generate_path: json_response({"error": "boom"}, status_code=503)}

        with pytest.raises(ServerError) as exc_info:
            await provider.send_once(make_config(backend))
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_one_shot_timeout(self, backend):
        provider, _ = make_provider(backend, send_error=httpx.ReadTimeout("read"))

        with pytest.raises(RequestTimeoutError):
            await provider.send_once(make_config(backend))
