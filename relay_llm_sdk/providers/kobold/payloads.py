"""Request body models and builder for the KoboldCPP generate API."""

from typing import List, Optional

from pydantic import BaseModel

from ...models.generation import GenerationConfig


class KoboldRequestBody(BaseModel):
    """
    POST /api/v1/generate body.

    Field names are the snake_case keys KoboldCPP expects, so the body
    dumps straight to the wire without aliasing.
    """

    prompt: str
    memory: Optional[str] = None
    max_context_length: Optional[int] = None
    max_length: Optional[int] = None
    quiet: Optional[bool] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    top_a: Optional[float] = None
    min_p: Optional[float] = None
    typical: Optional[float] = None
    tfs: Optional[float] = None
    rep_pen: Optional[float] = None
    rep_pen_range: Optional[int] = None
    rep_pen_slope: Optional[float] = None
    stop_sequence: Optional[List[str]] = None
    trim_stop: Optional[bool] = None
    sampler_order: Optional[List[int]] = None
    sampler_seed: Optional[int] = None


def build_memory(config: GenerationConfig) -> Optional[str]:
    """Character context in fixed order followed by the caller's memory.

    With no character context the caller's memory is used as-is and may
    be None.
    """
    parts = config.character_context()
    if not parts:
        return config.memory
    return "".join(parts) + (config.memory or "")


def build_prompt(config: GenerationConfig) -> str:
    """The raw prompt, or a ``role: content`` transcript of the messages."""
    if config.prompt is not None:
        return config.prompt
    return "\n".join(
        f"{_role_value(message.role)}: {message.content}" for message in config.messages
    )


def build_kobold_body(config: GenerationConfig) -> KoboldRequestBody:
    """Render a GenerationConfig as a KoboldCPP request body.

    The same body serves one-shot and streamed calls; KoboldCPP selects
    streaming by endpoint rather than by a body flag.
    """
    return KoboldRequestBody(
        prompt=build_prompt(config),
        memory=build_memory(config),
        max_context_length=config.max_context_length,
        max_length=config.max_length,
        quiet=False,
        temperature=config.temperature,
        top_p=config.top_p,
        top_k=config.top_k,
        top_a=config.top_a,
        min_p=config.min_p,
        typical=config.typical,
        tfs=config.tfs,
        rep_pen=config.repetition_penalty,
        rep_pen_range=config.repetition_range,
        rep_pen_slope=config.repetition_slope,
        stop_sequence=config.stop,
        trim_stop=config.trim_stop,
        sampler_order=config.sampler_order,
        sampler_seed=config.seed,
    )


def _role_value(role) -> str:
    return getattr(role, "value", role)
