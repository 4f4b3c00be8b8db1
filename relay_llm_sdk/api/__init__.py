from .client import RelayLLMClient

__all__ = ["RelayLLMClient"]
