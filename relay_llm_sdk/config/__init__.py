"""Configuration for Relay LLM SDK."""

import os
from typing import Optional

from .constants import APP_TITLE_ENV, DEFAULT_APP_TITLE, DEFAULT_REFERER, REFERER_ENV


def env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back on missing or bad values."""
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def env_int(name: str, default: int) -> int:
    """Read an int from the environment, falling back on missing or bad values."""
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def app_title(override: Optional[str] = None) -> str:
    return override or os.getenv(APP_TITLE_ENV) or DEFAULT_APP_TITLE


def referer(override: Optional[str] = None) -> str:
    return override or os.getenv(REFERER_ENV) or DEFAULT_REFERER


__all__ = ["env_float", "env_int", "app_title", "referer"]
