from .adapter import OpenRouterProvider
from .parsers import OpenRouterChatResponse, OpenRouterKeyData, OpenRouterModel, OpenRouterStreamChunk
from .payloads import OpenRouterRequestBody, build_openrouter_body
from .streaming import interpret_openrouter_event

__all__ = [
    "OpenRouterProvider",
    "OpenRouterChatResponse",
    "OpenRouterKeyData",
    "OpenRouterModel",
    "OpenRouterStreamChunk",
    "OpenRouterRequestBody",
    "build_openrouter_body",
    "interpret_openrouter_event",
]
