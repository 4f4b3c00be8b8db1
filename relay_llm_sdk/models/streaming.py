"""
Streaming configuration models.

This module provides configuration options for the streaming session:
buffering between the reader task and the consumer, and diagnostics for
event lines the session could not interpret.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


SkippedLineHook = Callable[[str], None]


@dataclass
class StreamingOptions:
    """Per-session streaming settings passed to ``stream()``."""

    max_buffered_fragments: int = 1
    """Fragments the reader task may produce ahead of the consumer."""

    on_skipped_line: Optional[SkippedLineHook] = None
    """Called with the payload of every data line that decoded to no known event."""

    log_skipped_lines: bool = True
    """Log skipped data lines at DEBUG level."""

    log_streaming_metrics: bool = False
    """Log fragment count and throughput when the stream terminates."""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.max_buffered_fragments < 1:
            self.max_buffered_fragments = 1

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "StreamingOptions":
        """Create StreamingOptions from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_config = {k: v for k, v in config.items() if k in known_fields}
        return cls(**filtered_config)

