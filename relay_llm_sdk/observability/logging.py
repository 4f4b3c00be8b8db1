"""
Structured logging utility for provider adapters.

Records go through the standard ``logging`` module under
``relay_llm_sdk.providers.<backend>`` and carry a ``[key=value ...]``
prefix (provider, model, request_id and call-specific fields) so they
can be grepped or parsed without a custom formatter.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional


class ProviderLogger:
    """Structured logger bound to one backend."""

    def __init__(self, provider_name: str):
        """
        Args:
            provider_name: Backend name, e.g. "openrouter" or "kobold"
        """
        self.provider = provider_name
        self.logger = logging.getLogger(f"relay_llm_sdk.providers.{provider_name}")

    def _format_message(self, message: str, **fields: Any) -> str:
        parts = [f"provider={self.provider}"]
        parts.extend(f"{key}={value}" for key, value in fields.items() if value is not None)
        return f"[{' '.join(parts)}] {message}"

    def _log(self, level: int, message: str, model: Optional[str], request_id: Optional[str],
             fields: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(level, self._format_message(message, model=model, request_id=request_id, **fields))

    def debug(self, message: str, model: Optional[str] = None,
              request_id: Optional[str] = None, **fields):
        self._log(logging.DEBUG, message, model, request_id, fields)

    def info(self, message: str, model: Optional[str] = None,
             request_id: Optional[str] = None, **fields):
        self._log(logging.INFO, message, model, request_id, fields)

    def warning(self, message: str, model: Optional[str] = None,
                request_id: Optional[str] = None, **fields):
        self._log(logging.WARNING, message, model, request_id, fields)

    def error(self, message: str, model: Optional[str] = None,
              request_id: Optional[str] = None, error: Optional[BaseException] = None, **fields):
        """Log an error; ``error`` contributes its type and message as fields."""
        if error is not None:
            fields["error_type"] = type(error).__name__
            fields["error_msg"] = str(error)
        self._log(logging.ERROR, message, model, request_id, fields)

    @staticmethod
    def new_request_id() -> str:
        """Short random id used to correlate the records of one call."""
        return uuid.uuid4().hex[:8]

    @contextmanager
    def track_request(self, method: str, model: Optional[str],
                      request_id: Optional[str] = None) -> Iterator[Dict[str, Any]]:
        """
        Log the start, completion or failure of one call with its duration.

        Failures are logged and re-raised unchanged.

        Args:
            method: Operation name (e.g. "send", "get_model")
            model: Model in use, if any
            request_id: Correlation id, generated when omitted

        Yields:
            Dict with request_id, model, method and start_time
        """
        request_info = {
            "request_id": request_id or self.new_request_id(),
            "model": model,
            "method": method,
            "start_time": time.time(),
        }
        self.debug(f"Starting {method} request", model, request_info["request_id"], method=method)

        try:
            yield request_info
        except Exception as e:
            self.error(
                f"Failed {method} request",
                model,
                request_info["request_id"],
                error=e,
                method=method,
                duration_ms=self._elapsed_ms(request_info["start_time"]),
            )
            raise

        self.info(
            f"Completed {method} request",
            model,
            request_info["request_id"],
            method=method,
            duration_ms=self._elapsed_ms(request_info["start_time"]),
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    def log_usage(self, prompt_tokens: Optional[int], completion_tokens: Optional[int],
                  model: Optional[str], request_id: str):
        """Log token counts reported by a one-shot response, when there are any."""
        if prompt_tokens is None and completion_tokens is None:
            return
        self.info(
            "Token usage",
            model,
            request_id,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=(prompt_tokens or 0) + (completion_tokens or 0),
        )

    def log_streaming_metrics(self, chunks: int, total_chars: int, duration: float,
                              model: Optional[str], request_id: str, skipped_lines: int = 0):
        """Log fragment count and throughput of a completed stream."""
        self.info(
            "Streaming metrics",
            model,
            request_id,
            chunks=chunks,
            total_chars=total_chars,
            skipped_lines=skipped_lines,
            duration_ms=int(duration * 1000),
            chars_per_second=int(total_chars / duration) if duration > 0 else 0,
        )

    def log_skipped_line(self, payload: str, model: Optional[str], request_id: str):
        """Log a stream data line that decoded to no known event."""
        preview = payload if len(payload) <= 80 else payload[:77] + "..."
        self.debug(f"Skipped unrecognized stream line: {preview!r}", model, request_id)
