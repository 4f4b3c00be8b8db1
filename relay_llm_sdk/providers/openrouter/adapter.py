import os
from typing import List, Optional

from dotenv import load_dotenv

from ..base import ProviderAdapter
from ...config import env_float
from ...config.constants import (
    OPENROUTER_API_KEY_ENV,
    OPENROUTER_BASE_URL,
    OPENROUTER_BASE_URL_ENV,
    OPENROUTER_CHAT_PATH,
    OPENROUTER_DEFAULT_TIMEOUT,
    OPENROUTER_KEY_PATH,
    OPENROUTER_MODELS_PATH,
    OPENROUTER_TIMEOUT_ENV,
)
from ...errors import InvalidResponseError, ProviderError
from ...http.transport import Transport
from ...models.events import StreamEvent
from ...models.generation import BackendType, GenerationConfig, UnifiedResponse
from .parsers import (
    OpenRouterChatResponse,
    OpenRouterKeyData,
    OpenRouterKeyResponse,
    OpenRouterModel,
    OpenRouterModelList,
    to_unified_response,
)
from .payloads import OpenRouterRequestBody, build_openrouter_body
from .streaming import interpret_openrouter_event

# Load environment variables
load_dotenv()


class OpenRouterProvider(ProviderAdapter):
    """OpenRouter chat-completion backend."""

    backend = BackendType.OPENROUTER
    provider_name = "openrouter"
    generate_path = OPENROUTER_CHAT_PATH
    stream_path = OPENROUTER_CHAT_PATH
    response_model = OpenRouterChatResponse

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[Transport] = None,
        app_title: Optional[str] = None,
        referer: Optional[str] = None,
    ):
        if timeout is None:
            # Allow overriding default timeout via env variable (seconds)
            timeout = env_float(OPENROUTER_TIMEOUT_ENV, OPENROUTER_DEFAULT_TIMEOUT)
        super().__init__(
            base_url=base_url or os.getenv(OPENROUTER_BASE_URL_ENV) or OPENROUTER_BASE_URL,
            api_key=api_key if api_key is not None else os.getenv(OPENROUTER_API_KEY_ENV),
            timeout=timeout,
            transport=transport,
            app_title=app_title,
            referer=referer,
        )

    def build_request_body(self, config: GenerationConfig, stream: bool = False) -> OpenRouterRequestBody:
        return build_openrouter_body(config, stream=stream)

    def parse_response(self, response: OpenRouterChatResponse) -> UnifiedResponse:
        return to_unified_response(response)

    def interpret_stream_event(self, payload: str) -> Optional[StreamEvent]:
        return interpret_openrouter_event(payload)

    async def check_api_key(self) -> OpenRouterKeyData:
        """
        Validate the configured API key against GET /key.

        Returns:
            The key metadata reported by OpenRouter

        Raises:
            InvalidResponseError: the body decoded but carries no key label
            ServerError: the key was rejected (401) or another non-2xx status
        """
        with self.logger.track_request("check_api_key", None):
            response = await self.request("GET", OPENROUTER_KEY_PATH, OpenRouterKeyResponse)
            if response.data is None or not response.data.label:
                raise InvalidResponseError("API key response has no label", provider=self.provider_name)
            return response.data

    async def list_models(self) -> List[OpenRouterModel]:
        """Fetch the OpenRouter model catalog."""
        with self.logger.track_request("list_models", None):
            response = await self.request("GET", OPENROUTER_MODELS_PATH, OpenRouterModelList)
            return response.data

    async def is_available(self) -> bool:
        """True when the API key is accepted; never raises."""
        if not self.api_key:
            return False
        try:
            await self.check_api_key()
        except ProviderError:
            return False
        return True
