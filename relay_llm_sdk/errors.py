"""
Error taxonomy and error mapping.

Every failure the SDK reports is one of the ``ProviderError`` subclasses
below. Transport-library exceptions are converted by ``ErrorMapper``
before they reach the caller, so callers only ever need to handle this
hierarchy. Nothing here retries; retry policy belongs to the caller.
"""

import json
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx
from pydantic import ValidationError

if TYPE_CHECKING:
    from .models.generation import UnifiedResponse


class ErrorKind(str, Enum):
    """Categories of failure, one per exception class."""
    INVALID_URL = "invalid_url"
    INVALID_RESPONSE = "invalid_response"
    INVALID_DATA = "invalid_data"
    DECODING = "decoding"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    INVALID_SERVICE = "invalid_service"
    UNSUPPORTED_IMPORT = "unsupported_import"


class ProviderError(Exception):
    """
    Base exception for provider-related errors.

    Attributes:
        message: Error message
        provider: Provider name, if the error is tied to one backend
        status_code: HTTP status code if applicable
        original_error: The wrapped library exception, if any
        partial: For streamed calls, a snapshot of the text accumulated
            before the stream ended abnormally (``disconnect=True``)
    """

    kind: ErrorKind = ErrorKind.INVALID_DATA
    default_message = "Invalid data"

    def __init__(
        self,
        message: Optional[str] = None,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.provider = provider
        self.status_code = status_code
        self.original_error = original_error
        self.partial: Optional["UnifiedResponse"] = None

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the error for logging."""
        return {
            "kind": self.kind.value,
            "provider": self.provider,
            "status_code": self.status_code,
            "message": self.message,
            "error_type": type(self.original_error).__name__ if self.original_error else None,
        }


class InvalidURLError(ProviderError):
    """The endpoint URL could not be constructed."""
    kind = ErrorKind.INVALID_URL
    default_message = "Invalid URL"


class InvalidResponseError(ProviderError):
    """The response was not a usable HTTP response or envelope."""
    kind = ErrorKind.INVALID_RESPONSE
    default_message = "Invalid response"


class InvalidDataError(ProviderError):
    """Generic transport or body failure."""
    kind = ErrorKind.INVALID_DATA
    default_message = "Invalid data"


class DecodingError(ProviderError):
    """A body did not match the expected shape, or could not be encoded."""
    kind = ErrorKind.DECODING
    default_message = "Decoding error"


class RequestTimeoutError(ProviderError):
    """The request deadline was exceeded while connecting or reading."""
    kind = ErrorKind.TIMEOUT
    default_message = "Timeout"


class ServerError(ProviderError):
    """The server answered with a status outside 200-299."""
    kind = ErrorKind.SERVER_ERROR

    def __init__(self, status_code: int, provider: Optional[str] = None, message: Optional[str] = None):
        super().__init__(
            message or f"Server error ({status_code})",
            provider=provider,
            status_code=status_code,
        )


class InvalidServiceError(ProviderError):
    """The operation is not supported by the bound backend."""
    kind = ErrorKind.INVALID_SERVICE
    default_message = "Invalid service type"


class UnsupportedImportError(ProviderError):
    """A character import URL is not from a supported site."""
    kind = ErrorKind.UNSUPPORTED_IMPORT
    default_message = "Unsupported URL import"


class ErrorMapper:
    """Maps library exceptions to the SDK error taxonomy."""

    @staticmethod
    def map_transport_error(error: BaseException, provider: Optional[str] = None) -> ProviderError:
        """
        Map a transport-level exception to a ProviderError.

        Args:
            error: The exception raised while sending or reading
            provider: Provider name for the error metadata

        Returns:
            ProviderError: timeout, invalid URL, or generic invalid data
        """
        if isinstance(error, ProviderError):
            if error.provider is None:
                error.provider = provider
            return error

        if isinstance(error, httpx.TimeoutException):
            mapped: ProviderError = RequestTimeoutError(provider=provider, original_error=error)
        elif isinstance(error, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
            mapped = InvalidURLError(f"Invalid URL: {error}", provider=provider, original_error=error)
        else:
            mapped = InvalidDataError(f"Invalid data: {error}", provider=provider, original_error=error)
        return mapped

    @staticmethod
    def map_decode_error(error: BaseException, provider: Optional[str] = None) -> DecodingError:
        """Map a JSON or validation failure to a DecodingError."""
        if isinstance(error, ValidationError):
            message = f"Decoding error: {error.error_count()} validation error(s)"
        elif isinstance(error, json.JSONDecodeError):
            message = f"Decoding error: {error.msg}"
        else:
            message = f"Decoding error: {error}"
        return DecodingError(message, provider=provider, original_error=error)

    @staticmethod
    def get_error_classification(error: ProviderError) -> Dict[str, Any]:
        """Get error classification details for logging."""
        return error.to_dict()
