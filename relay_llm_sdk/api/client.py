"""Main client interface for Relay LLM SDK."""

from typing import List, Optional

from ..errors import InvalidServiceError
from ..models.generation import BackendType, GenerationConfig, UnifiedResponse
from ..models.streaming import StreamingOptions
from ..providers.base import ProviderAdapter
from ..providers.kobold import KoboldProvider
from ..providers.openrouter import OpenRouterProvider
from ..providers.openrouter.parsers import OpenRouterModel
from ..streaming.session import StreamSession

_ADAPTER_TYPES = {
    BackendType.OPENROUTER: OpenRouterProvider,
    BackendType.KOBOLD: KoboldProvider,
}


class RelayLLMClient:
    """
    High-level client bound to one backend.

    The client declares which backend it serves and checks every call
    against the adapter it was built with, so asking a cloud client for
    a local-only query fails with ``InvalidServiceError`` before any
    request is sent.

    Usage::

        async with RelayLLMClient.openrouter() as client:
            response = await client.send_message(config)
    """

    def __init__(self, adapter: ProviderAdapter, backend: Optional[BackendType] = None):
        """
        Initialize the client.

        Args:
            adapter: Provider adapter that performs the requests
            backend: Declared backend; defaults to the adapter's own
        """
        self.adapter = adapter
        self.backend = BackendType(backend) if backend is not None else adapter.backend

    @classmethod
    def openrouter(cls, **kwargs) -> "RelayLLMClient":
        """Client for the OpenRouter backend. Keyword arguments go to OpenRouterProvider."""
        return cls(OpenRouterProvider(**kwargs), BackendType.OPENROUTER)

    @classmethod
    def kobold(cls, **kwargs) -> "RelayLLMClient":
        """Client for a KoboldCPP server. Keyword arguments go to KoboldProvider."""
        return cls(KoboldProvider(**kwargs), BackendType.KOBOLD)

    def _require(self, backend: Optional[BackendType] = None, operation: str = "operation") -> ProviderAdapter:
        expected_type = _ADAPTER_TYPES[self.backend]
        if not isinstance(self.adapter, expected_type):
            raise InvalidServiceError(
                f"Client declared for {self.backend.value} is bound to {type(self.adapter).__name__}",
                provider=self.adapter.provider_name,
            )
        if backend is not None and backend != self.backend:
            raise InvalidServiceError(
                f"{operation} is only supported by the {backend.value} backend",
                provider=self.adapter.provider_name,
            )
        return self.adapter

    async def connect(self) -> str:
        """
        Check that the backend is reachable and usable.

        Returns:
            The API key label for OpenRouter, the served model name for KoboldCPP
        """
        adapter = self._require(operation="connect")
        if self.backend == BackendType.OPENROUTER:
            key = await adapter.check_api_key()
            return key.label
        return await adapter.get_model()

    async def send_message(self, config: GenerationConfig) -> UnifiedResponse:
        """Send one generation request and wait for the full response."""
        adapter = self._require(operation="send_message")
        return await adapter.send_once(config)

    def stream_message(
        self,
        config: GenerationConfig,
        options: Optional[StreamingOptions] = None,
    ) -> StreamSession:
        """
        Start a streamed generation.

        Returns a session to iterate with ``async for``; every fragment
        carries the text accumulated so far. Close the session (or leave
        its ``async with`` block) to cancel the request early.
        """
        adapter = self._require(operation="stream_message")
        return adapter.stream(config, options)

    async def count_tokens(self, text: str) -> int:
        adapter = self._require(BackendType.KOBOLD, "count_tokens")
        return await adapter.count_tokens(text)

    async def get_max_context_length(self) -> int:
        adapter = self._require(BackendType.KOBOLD, "get_max_context_length")
        return await adapter.get_max_context_length()

    async def get_max_length(self) -> int:
        adapter = self._require(BackendType.KOBOLD, "get_max_length")
        return await adapter.get_max_length()

    async def get_version(self) -> str:
        adapter = self._require(BackendType.KOBOLD, "get_version")
        return await adapter.get_version()

    async def list_models(self) -> List[OpenRouterModel]:
        adapter = self._require(BackendType.OPENROUTER, "list_models")
        return await adapter.list_models()

    async def aclose(self) -> None:
        await self.adapter.aclose()

    async def __aenter__(self) -> "RelayLLMClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
