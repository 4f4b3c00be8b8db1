from .adapter import KoboldProvider
from .parsers import KoboldGenerateResponse, KoboldStreamChunk
from .payloads import KoboldRequestBody, build_kobold_body
from .streaming import interpret_kobold_event

__all__ = [
    "KoboldProvider",
    "KoboldGenerateResponse",
    "KoboldStreamChunk",
    "KoboldRequestBody",
    "build_kobold_body",
    "interpret_kobold_event",
]
