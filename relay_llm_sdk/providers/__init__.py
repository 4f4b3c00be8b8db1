"""Backend adapters."""

from .base import ProviderAdapter
from .kobold import KoboldProvider
from .openrouter import OpenRouterProvider

__all__ = ["ProviderAdapter", "KoboldProvider", "OpenRouterProvider"]
