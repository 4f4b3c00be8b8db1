import os
from typing import Optional

from dotenv import load_dotenv

from ..base import ProviderAdapter, encode_body
from ...config import env_float, env_int
from ...config.constants import (
    KOBOLD_DEFAULT_HOST,
    KOBOLD_DEFAULT_PORT,
    KOBOLD_DEFAULT_TIMEOUT,
    KOBOLD_GENERATE_PATH,
    KOBOLD_HOST_ENV,
    KOBOLD_MAX_CONTEXT_LENGTH_PATH,
    KOBOLD_MAX_LENGTH_PATH,
    KOBOLD_MODEL_PATH,
    KOBOLD_PORT_ENV,
    KOBOLD_STREAM_PATH,
    KOBOLD_TIMEOUT_ENV,
    KOBOLD_TOKEN_COUNT_PATH,
    KOBOLD_VERSION_PATH,
)
from ...http.transport import Transport
from ...models.events import StreamEvent
from ...models.generation import BackendType, GenerationConfig, UnifiedResponse
from .parsers import (
    KoboldGenerateResponse,
    KoboldResultResponse,
    KoboldTokenCountResponse,
    KoboldValueResponse,
    to_unified_response,
)
from .payloads import KoboldRequestBody, build_kobold_body
from .streaming import interpret_kobold_event

# Load environment variables
load_dotenv()


class KoboldProvider(ProviderAdapter):
    """KoboldCPP local generation backend."""

    backend = BackendType.KOBOLD
    provider_name = "kobold"
    generate_path = KOBOLD_GENERATE_PATH
    stream_path = KOBOLD_STREAM_PATH
    response_model = KoboldGenerateResponse

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[Transport] = None,
        app_title: Optional[str] = None,
        referer: Optional[str] = None,
    ):
        self.host = host or os.getenv(KOBOLD_HOST_ENV) or KOBOLD_DEFAULT_HOST
        self.port = port if port is not None else env_int(KOBOLD_PORT_ENV, KOBOLD_DEFAULT_PORT)
        if timeout is None:
            timeout = env_float(KOBOLD_TIMEOUT_ENV, KOBOLD_DEFAULT_TIMEOUT)
        super().__init__(
            base_url=f"http://{self.host}:{self.port}",
            api_key=None,
            timeout=timeout,
            transport=transport,
            app_title=app_title,
            referer=referer,
        )

    def build_request_body(self, config: GenerationConfig, stream: bool = False) -> KoboldRequestBody:
        return build_kobold_body(config)

    def parse_response(self, response: KoboldGenerateResponse) -> UnifiedResponse:
        return to_unified_response(response)

    def interpret_stream_event(self, payload: str) -> Optional[StreamEvent]:
        return interpret_kobold_event(payload)

    # Server queries

    async def get_model(self) -> str:
        """Name of the model the server has loaded."""
        with self.logger.track_request("get_model", None):
            response = await self.request("GET", KOBOLD_MODEL_PATH, KoboldResultResponse)
            return response.result

    async def get_version(self) -> str:
        with self.logger.track_request("get_version", None):
            response = await self.request("GET", KOBOLD_VERSION_PATH, KoboldResultResponse)
            return response.result

    async def get_max_context_length(self) -> int:
        with self.logger.track_request("get_max_context_length", None):
            response = await self.request("GET", KOBOLD_MAX_CONTEXT_LENGTH_PATH, KoboldValueResponse)
            return response.value

    async def get_max_length(self) -> int:
        with self.logger.track_request("get_max_length", None):
            response = await self.request("GET", KOBOLD_MAX_LENGTH_PATH, KoboldValueResponse)
            return response.value

    async def count_tokens(self, text: str) -> int:
        """
        Count tokens of ``text`` with the loaded model's tokenizer.

        Args:
            text: Text to tokenize

        Returns:
            Number of tokens
        """
        with self.logger.track_request("count_tokens", None):
            body = encode_body({"prompt": text}, self.provider_name)
            response = await self.request("POST", KOBOLD_TOKEN_COUNT_PATH, KoboldTokenCountResponse, body)
            return response.value
