"""
Backend endpoints, request headers and generation defaults.

Values here are shared by the payload builders, the provider adapters
and the CLI. Environment variable names are listed alongside the
defaults they override.
"""

# OpenRouter (cloud chat-completion backend)
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_CHAT_PATH = "/chat/completions"
OPENROUTER_MODELS_PATH = "/models"
OPENROUTER_KEY_PATH = "/key"
OPENROUTER_DONE_SENTINEL = "[DONE]"
OPENROUTER_DEFAULT_TIMEOUT = 60.0

# KoboldCPP (local generation backend)
KOBOLD_DEFAULT_HOST = "localhost"
KOBOLD_DEFAULT_PORT = 5001
KOBOLD_GENERATE_PATH = "/api/v1/generate"
KOBOLD_STREAM_PATH = "/api/extra/generate/stream"
KOBOLD_TOKEN_COUNT_PATH = "/api/extra/tokencount"
KOBOLD_MODEL_PATH = "/api/v1/model"
KOBOLD_VERSION_PATH = "/api/v1/info/version"
KOBOLD_MAX_CONTEXT_LENGTH_PATH = "/api/v1/config/max_context_length"
KOBOLD_MAX_LENGTH_PATH = "/api/v1/config/max_length"
KOBOLD_FINISH_REASONS = frozenset({"stop", "length"})
KOBOLD_DEFAULT_TIMEOUT = 120.0

# Headers attached to every request
DEFAULT_APP_TITLE = "Relay LLM SDK"
DEFAULT_REFERER = "https://github.com/relay-llm/relay-llm-sdk"

# Server-sent event framing
SSE_DATA_PREFIX = "data:"

# Generation defaults
DEFAULT_MODEL = "openai/gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.75
DEFAULT_TOP_P = 0.92
DEFAULT_TOP_K = 100
DEFAULT_TOP_A = 0.92
DEFAULT_MIN_P = 0.0
DEFAULT_TYPICAL = 1.0
DEFAULT_TFS = 1.0
DEFAULT_REPETITION_PENALTY = 1.07
DEFAULT_REPETITION_RANGE = 360
DEFAULT_REPETITION_SLOPE = 0.7
DEFAULT_MAX_LENGTH = 240
DEFAULT_MAX_CONTEXT_LENGTH = 4096
DEFAULT_CHAT_STOP = ("\nUser:", "\nAssistant:")
DEFAULT_KOBOLD_STOP = ("\nUser:", "\nBot:")
DEFAULT_SAMPLER_ORDER = (6, 0, 1, 3, 4, 2, 5)

# Environment variables
OPENROUTER_API_KEY_ENV = "OPENROUTER_API_KEY"
OPENROUTER_BASE_URL_ENV = "OPENROUTER_BASE_URL"
OPENROUTER_TIMEOUT_ENV = "OPENROUTER_TIMEOUT"
KOBOLD_HOST_ENV = "KOBOLD_HOST"
KOBOLD_PORT_ENV = "KOBOLD_PORT"
KOBOLD_TIMEOUT_ENV = "KOBOLD_TIMEOUT"
APP_TITLE_ENV = "RELAY_APP_TITLE"
REFERER_ENV = "RELAY_REFERER"
