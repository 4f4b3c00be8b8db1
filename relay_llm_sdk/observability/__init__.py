"""Observability for Relay LLM SDK: structured provider logging."""

from .logging import ProviderLogger

__all__ = ["ProviderLogger"]
