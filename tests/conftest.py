"""Shared pytest fixtures for Relay LLM SDK tests."""

import sys
from pathlib import Path

import pytest

# Make tests/helpers importable regardless of pytest import mode
sys.path.insert(0, str(Path(__file__).parent))

from helpers.streaming_mocks import FakeTransport, json_response
from relay_llm_sdk.config.constants import (
    APP_TITLE_ENV,
    KOBOLD_HOST_ENV,
    KOBOLD_PORT_ENV,
    KOBOLD_TIMEOUT_ENV,
    OPENROUTER_API_KEY_ENV,
    OPENROUTER_BASE_URL_ENV,
    OPENROUTER_TIMEOUT_ENV,
    REFERER_ENV,
)
from relay_llm_sdk.models.conversation_types import ChatMessage
from relay_llm_sdk.models.generation import GenerationConfig
from relay_llm_sdk.providers.kobold import KoboldProvider
from relay_llm_sdk.providers.openrouter import OpenRouterProvider

RELAY_ENV_VARS = (
    OPENROUTER_API_KEY_ENV,
    OPENROUTER_BASE_URL_ENV,
    OPENROUTER_TIMEOUT_ENV,
    KOBOLD_HOST_ENV,
    KOBOLD_PORT_ENV,
    KOBOLD_TIMEOUT_ENV,
    APP_TITLE_ENV,
    REFERER_ENV,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without I/O")
    config.addinivalue_line("markers", "integration: tests that go through httpx")
    config.addinivalue_line("markers", "conformance: behavior shared by both backends")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's .env or shell settings out of the tests."""
    for name in RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Environment for both backends."""
    env_vars = {
        OPENROUTER_API_KEY_ENV: "test-openrouter-key",
        KOBOLD_HOST_ENV: "kobold.local",
        KOBOLD_PORT_ENV: "5005",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def sample_messages():
    """A short conversation."""
    return [
        ChatMessage.user("Hi there"),
        ChatMessage.assistant("Hello! How can I help?"),
        ChatMessage.user("Tell me a joke"),
    ]


@pytest.fixture
def character_config(sample_messages):
    """Chat config carrying all four character context fields."""
    return GenerationConfig.for_openrouter(
        "openai/gpt-4o-mini",
        sample_messages,
        prompt_template="You are {{char}}.",
        character_description="A pirate.",
        character_personality="Boisterous.",
        character_scenario="On a ship.",
    )


@pytest.fixture
def openrouter_completion():
    """A non-streamed /chat/completions body."""
    return {
        "id": "gen-123",
        "provider": "OpenAI",
        "model": "openai/gpt-4o-mini",
        "object": "chat.completion",
        "created": 1735689600,
        "choices": [{
            "index": 0,
            "finish_reason": "stop",
            "native_finish_reason": "stop",
            "message": {"role": "assistant", "content": "Why did the pirate...", "refusal": None},
        }],
        "usage": {"prompt_tokens": 12, "completion_tokens": 7, "total_tokens": 19},
    }


@pytest.fixture
def kobold_generation():
    """A /api/v1/generate body."""
    return {"results": [{"text": " Arr, matey!", "prompt_tokens": 30, "completion_tokens": 4}]}


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def openrouter_provider(fake_transport):
    return OpenRouterProvider(api_key="sk-test", transport=fake_transport)


@pytest.fixture
def kobold_provider(fake_transport):
    return KoboldProvider(host="localhost", port=5001, transport=fake_transport)


@pytest.fixture
def key_response():
    return json_response({"data": {"label": "sk-or-v1-abc...xyz", "usage": 0.5, "limit": None}})
