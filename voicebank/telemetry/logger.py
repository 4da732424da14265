"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic phase-level runtime logs through `loguru`.
- Keep secrets and audio payloads out of log lines.
"""

from __future__ import annotations

import re
import sys
from typing import TextIO

from loguru import logger


_SECRET_CONTEXT_KEYS = frozenset({"api_key", "audio", "audio_data", "text"})
_MAX_CONTEXT_VALUE_CHARS = 64
_UNSAFE_CHARACTERS = re.compile(r"[^A-Za-z0-9_.:/-]")


def _context_token(key: str, value: object) -> str:
    """Render one `key=value` token; secret keys are masked, long values capped."""

    if key in _SECRET_CONTEXT_KEYS:
        return f"{key}=[redacted]"
    raw = str(value).strip()
    if not raw:
        return f"{key}=none"
    token = _UNSAFE_CHARACTERS.sub("_", raw)[:_MAX_CONTEXT_VALUE_CHARS]
    return f"{key}={token}"


def _format_context(context: dict[str, object]) -> str:
    """Serialize context tokens sorted by key, with a leading space."""

    return "".join(f" {_context_token(key, context[key])}" for key in sorted(context))


class RunLogger:
    """Emit deterministic phase logs for workflow activity."""

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Route loguru output to the sink with message-only formatting."""

        self._sink = sink or sys.stderr
        logger.remove()
        logger.add(self._sink, format="{message}", level=level.upper(), colorize=False)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[phase] level={level} stage={stage} event={event}{_format_context(context)}"
        logger.log(level, line)

    def log_stage_start(self, stage: str, **context: object) -> None:
        """Emit a stage-start runtime event."""

        self._emit("INFO", "start", stage, **context)

    def log_stage_complete(self, stage: str, **context: object) -> None:
        """Emit a stage-complete runtime event."""

        self._emit("INFO", "complete", stage, **context)

    def log_stage_skip(self, stage: str, reason: str, **context: object) -> None:
        """Emit a stage-skipped runtime event."""

        self._emit("INFO", "skip", stage, reason=reason, **context)

    def log_stage_warning(self, stage: str, error_type: str, **context: object) -> None:
        """Emit a non-fatal stage problem without sensitive payload details."""

        self._emit("WARNING", "warning", stage, error_type=error_type, **context)

    def log_stage_failure(self, stage: str, error_type: str) -> None:
        """Emit a stage-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, error_type=error_type)
