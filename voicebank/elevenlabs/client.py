"""ElevenLabs HTTP client for voice cloning and speech synthesis.

Three endpoints are used: `POST /voices/add` creates an instant voice clone
from uploaded audio files, `POST /voices/{voice_id}/samples` adds a sample to
it, and `POST /text-to-speech/{voice_id}` returns MPEG audio. Every failure is
raised as `ElevenLabsProviderError` with a `failure_kind` the workflow maps to
a stage diagnostic:

- `invalid_api_key`: missing key, HTTP 401, or provider status `invalid_api_key`
- `quota_exceeded`: provider status `quota_exceeded` or a 429 quota message
- `voice_not_found`: provider status `voice_not_found` or a 404 about a voice
- `timeout`: client timeout, HTTP 408/504, or a timeout message
- `transport`: connection-level failures
- `malformed_response`: unexpected or empty response bodies
- `http_error`: anything else
"""

from __future__ import annotations

import json
import re
from typing import Any, Sequence

import requests


DEFAULT_BASE_URL = "https://api.elevenlabs.io/v1"

AudioFile = tuple[str, bytes]

_MESSAGE_LIMIT = 180
_SECRET_PATTERNS = (
    (re.compile(r"\bsk_[A-Za-z0-9]{16,}\b"), "[redacted-key]"),
    (re.compile(r"(?i)xi-api-key\s*[:=]\s*\S+"), "xi-api-key: [redacted-key]"),
)
_HEADLINES = {
    "invalid_api_key": "ElevenLabs authentication failed",
    "quota_exceeded": "ElevenLabs quota is insufficient for this request",
    "voice_not_found": "ElevenLabs could not find the requested voice",
    "timeout": "ElevenLabs request timed out",
}


class ElevenLabsProviderError(RuntimeError):
    """An ElevenLabs request failed or returned unusable output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        provider_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.provider_code = provider_code


def _clean_provider_text(text: str) -> str:
    """Redact key-like tokens, collapse whitespace, and cap the length."""

    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    compact = " ".join(text.split())
    if len(compact) > _MESSAGE_LIMIT:
        return compact[: _MESSAGE_LIMIT - 1] + "..."
    return compact


def _parse_error_body(body: str) -> tuple[str, str | None]:
    """Return `(message, provider_status)` from an error response body.

    ElevenLabs reports errors as `{"detail": "..."}`, as
    `{"detail": {"status": "...", "message": "..."}}`, or as a list of
    validation entries with `msg` fields. Other bodies are used verbatim.
    """

    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return _clean_provider_text(body), None

    detail = payload.get("detail") if isinstance(payload, dict) else None
    status: str | None = None
    message = ""
    if isinstance(detail, str):
        message = detail
    elif isinstance(detail, dict):
        status = str(detail.get("status") or "").strip() or None
        message = str(detail.get("message") or "")
    elif isinstance(detail, list):
        message = "; ".join(
            str(entry["msg"]).strip()
            for entry in detail
            if isinstance(entry, dict) and entry.get("msg")
        )
    return _clean_provider_text(message.strip() or body), status


def _failure_kind(status_code: int, message: str, provider_status: str | None) -> str:
    lowered = message.lower()
    status = (provider_status or "").lower()
    if status_code == 401 or status == "invalid_api_key":
        return "invalid_api_key"
    if status == "quota_exceeded" or (status_code == 429 and "quota" in lowered):
        return "quota_exceeded"
    if status == "voice_not_found" or (status_code == 404 and "voice" in lowered):
        return "voice_not_found"
    if status_code in (408, 504) or "timeout" in lowered or "timed out" in lowered:
        return "timeout"
    return "http_error"


def _error_from_http_failure(exc: requests.HTTPError) -> ElevenLabsProviderError:
    response = exc.response
    status_code = response.status_code if response is not None else 0
    body = ""
    if response is not None:
        body = bytes(response.content).decode("utf-8", errors="replace").strip()

    message, provider_status = _parse_error_body(body) if body else ("", None)
    kind = _failure_kind(status_code, message, provider_status)
    headline = f"{_HEADLINES.get(kind, 'ElevenLabs API error')} (HTTP {status_code})"
    return ElevenLabsProviderError(
        f"{headline}: {message}" if message else f"{headline}.",
        failure_kind=kind,
        status_code=status_code,
        provider_code=provider_status,
    )


def _error_from_transport_failure(exc: Exception) -> ElevenLabsProviderError:
    if isinstance(exc, (requests.Timeout, TimeoutError)):
        return ElevenLabsProviderError("ElevenLabs request timed out.", failure_kind="timeout")
    return ElevenLabsProviderError(
        f"ElevenLabs request transport error: {_clean_provider_text(str(exc))}",
        failure_kind="transport",
    )


class ElevenLabsClient:
    """Minimal requests-based ElevenLabs client authenticated by `xi-api-key`."""

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 60.0,
    ) -> None:
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @property
    def has_api_key(self) -> bool:
        """Return whether an API key is configured."""

        return bool(self.api_key)

    def add_voice(
        self,
        *,
        name: str,
        description: str,
        files: Sequence[AudioFile],
    ) -> str:
        """Create an instant voice clone from audio files and return its id."""

        body = self._post(
            "/voices/add",
            accept="application/json",
            data={"name": name, "description": description},
            files=files,
        )
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ElevenLabsProviderError(
                "ElevenLabs returned invalid JSON payload.",
                failure_kind="malformed_response",
            ) from exc

        voice_id = payload.get("voice_id") if isinstance(payload, dict) else None
        if not isinstance(voice_id, str) or not voice_id.strip():
            raise ElevenLabsProviderError(
                "ElevenLabs voice creation response is missing `voice_id`.",
                failure_kind="malformed_response",
            )
        return voice_id.strip()

    def add_voice_sample(self, *, voice_id: str, filename: str, audio: bytes) -> None:
        """Upload one additional audio sample to an existing voice."""

        self._post(
            f"/voices/{voice_id}/samples",
            accept="application/json",
            files=[(filename, audio)],
        )

    def text_to_speech(
        self,
        *,
        voice_id: str,
        text: str,
        model_id: str,
        voice_settings: dict[str, Any],
    ) -> bytes:
        """Return MPEG audio of `text` spoken in the voice."""

        audio = self._post(
            f"/text-to-speech/{voice_id}",
            accept="audio/mpeg",
            json_body={"text": text, "model_id": model_id, "voice_settings": voice_settings},
        )
        if not audio:
            raise ElevenLabsProviderError(
                "ElevenLabs speech response is empty.",
                failure_kind="malformed_response",
            )
        return audio

    def _post(
        self,
        path: str,
        *,
        accept: str,
        json_body: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        files: Sequence[AudioFile] | None = None,
    ) -> bytes:
        """POST to an API path and return the raw response body."""

        if not self.api_key:
            raise ElevenLabsProviderError(
                "ElevenLabs API key is not configured",
                failure_kind="invalid_api_key",
            )

        options: dict[str, Any] = {
            "headers": {"Accept": accept, "xi-api-key": self.api_key},
            "timeout": self.timeout_seconds,
        }
        if json_body is not None:
            options["json"] = json_body
        if data is not None:
            options["data"] = data
        if files is not None:
            options["files"] = [
                ("files", (filename, audio, "audio/mpeg")) for filename, audio in files
            ]

        try:
            response = requests.post(f"{self.base_url}{path}", **options)
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise _error_from_http_failure(exc) from exc
        except (requests.RequestException, TimeoutError) as exc:
            raise _error_from_transport_failure(exc) from exc
        return bytes(response.content)
