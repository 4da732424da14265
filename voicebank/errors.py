"""Domain exceptions for workflow, API, and CLI diagnostics."""

from __future__ import annotations


class SpeechGenerationError(RuntimeError):
    """A speech generation step failed.

    `stage` names the failing step (`configuration`, `samples`,
    `voice_provision`, `synthesis`, or a CLI step such as `config`).
    `detail` is the client-facing message; `hint` is an operator suggestion
    shown only in the CLI. `failure_kind` carries the provider classification
    when the failure came from ElevenLabs.
    """

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
        failure_kind: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
        self.failure_kind = failure_kind


class AudioPayloadError(ValueError):
    """Raised when an audio data URL cannot be decoded."""
