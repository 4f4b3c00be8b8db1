"""
Base Provider Adapter Interface

This module defines the abstract base class for both backend adapters.
An adapter translates a ``GenerationConfig`` into its backend's request
body, sends it through a ``Transport``, and reduces the backend's
responses and stream events to ``UnifiedResponse`` values.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..config import app_title as resolve_app_title, referer as resolve_referer
from ..errors import DecodingError, ErrorMapper, InvalidURLError, ServerError
from ..http.transport import HttpxTransport, Transport
from ..models.events import StreamEvent
from ..models.generation import BackendType, GenerationConfig, UnifiedResponse
from ..models.streaming import StreamingOptions
from ..observability.logging import ProviderLogger
from ..streaming.session import StreamSession
from ..streaming.types import PreparedRequest

ResponseModelT = TypeVar("ResponseModelT", bound=BaseModel)


def encode_body(payload: Dict[str, Any], provider: Optional[str] = None) -> bytes:
    """
    Encode a request payload as UTF-8 JSON.

    Raises:
        DecodingError: if the payload holds values JSON cannot carry
            (non-finite numbers, unencodable text, foreign objects)
    """
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise DecodingError(
            f"Could not encode request body: {e}",
            provider=provider,
            original_error=e,
        ) from e


class ProviderAdapter(ABC):
    """
    Abstract base class for backend adapters.

    The adapter is responsible for:
    - Rendering the backend request body from a GenerationConfig
    - Sending one-shot requests and decoding the full response
    - Interpreting single stream events (without keeping state between them)
    - Backend-specific server queries

    Stream accumulation is owned by ``StreamSession``, never by the adapter.
    """

    backend: BackendType
    provider_name: str
    generate_path: str
    stream_path: str
    response_model: Type[BaseModel]

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[Transport] = None,
        app_title: Optional[str] = None,
        referer: Optional[str] = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport or HttpxTransport()
        self.app_title = resolve_app_title(app_title)
        self.referer = resolve_referer(referer)
        self.logger = ProviderLogger(self.provider_name)

    # Rendering

    @abstractmethod
    def build_request_body(self, config: GenerationConfig, stream: bool = False) -> BaseModel:
        """Translate a config into this backend's request body model."""

    def render_body(self, config: GenerationConfig, stream: bool = False) -> bytes:
        """Build and encode the request body for ``config``."""
        body = self.build_request_body(config, stream=stream)
        return encode_body(body.model_dump(exclude_none=True), self.provider_name)

    def build_url(self, path: str) -> str:
        url = self.base_url.rstrip("/") + path
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise InvalidURLError(f"Invalid URL: {url}", provider=self.provider_name, original_error=e) from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise InvalidURLError(f"Invalid URL: {url}", provider=self.provider_name)
        return url

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-Title": self.app_title,
            "HTTP-Referer": self.referer,
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    # Decoding

    @abstractmethod
    def parse_response(self, response: BaseModel) -> UnifiedResponse:
        """Reduce a decoded one-shot response to a UnifiedResponse."""

    @abstractmethod
    def interpret_stream_event(self, payload: str) -> Optional[StreamEvent]:
        """
        Decode the payload of one ``data:`` line.

        Returns:
            A ContentDelta or StreamTermination, or None when the payload
            matches no known event shape (treated as a keep-alive).
        """

    # Operations

    async def request(
        self,
        method: str,
        path: str,
        response_model: Type[ResponseModelT],
        body: Optional[bytes] = None,
    ) -> ResponseModelT:
        """
        Issue one request and decode its body into ``response_model``.

        Raises:
            ServerError: status outside 200-299
            RequestTimeoutError: deadline exceeded
            InvalidDataError: any other transport failure
            DecodingError: body does not match ``response_model``
        """
        url = self.build_url(path)
        try:
            response = await self.transport.send(url, method, self.build_headers(), body, self.timeout)
        except Exception as e:
            raise ErrorMapper.map_transport_error(e, self.provider_name) from e

        if not response.is_success:
            raise ServerError(response.status_code, provider=self.provider_name)

        try:
            return response_model.model_validate_json(response.content)
        except ValidationError as e:
            raise ErrorMapper.map_decode_error(e, self.provider_name) from e

    async def send_once(self, config: GenerationConfig) -> UnifiedResponse:
        """Send a single generation request and return the full response."""
        with self.logger.track_request("send", config.model or None) as request_info:
            body = self.render_body(config, stream=False)
            response = await self.request("POST", self.generate_path, self.response_model, body)
            result = self.parse_response(response)
            self.logger.log_usage(
                result.prompt_tokens,
                result.completion_tokens,
                config.model or None,
                request_info["request_id"],
            )
            return result

    def stream(self, config: GenerationConfig, options: Optional[StreamingOptions] = None) -> StreamSession:
        """
        Prepare a streamed generation request.

        Nothing is sent until the returned session is first iterated.
        Rendering failures are raised here, before any I/O.
        """
        request = PreparedRequest(
            url=self.build_url(self.stream_path),
            method="POST",
            headers=self.build_headers(),
            body=self.render_body(config, stream=True),
            timeout=self.timeout,
        )
        return StreamSession(
            self.transport,
            request,
            self.interpret_stream_event,
            provider=self.provider_name,
            model=config.model or None,
            options=options,
            logger=self.logger,
        )

    async def aclose(self) -> None:
        await self.transport.aclose()

    def get_provider_name(self) -> str:
        return self.provider_name
