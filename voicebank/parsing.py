"""Shared parsing helpers for runtime values and audio payloads."""

from __future__ import annotations

import base64
import binascii

from .errors import AudioPayloadError


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})
_DEFAULT_MEDIA_TYPE = "application/octet-stream"


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def strip_data_url_prefix(audio_data: str) -> str:
    """Return the base64 payload of a data URL, or the input when it has no prefix."""

    header, separator, payload = audio_data.partition(",")
    if not separator:
        return header.strip()
    return payload.strip()


def data_url_media_type(audio_data: str) -> str:
    """Return the media type declared by a `data:` URL header."""

    header, separator, _ = audio_data.partition(",")
    if not separator or not header.startswith("data:"):
        return _DEFAULT_MEDIA_TYPE
    media_type = header[len("data:") :].split(";", 1)[0].strip()
    return media_type or _DEFAULT_MEDIA_TYPE


def decode_audio_data(audio_data: str) -> bytes:
    """Decode a base64 audio data URL (or bare base64 string) into raw bytes."""

    payload = strip_data_url_prefix(audio_data)
    if not payload:
        raise AudioPayloadError("Audio payload is empty.")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise AudioPayloadError("Audio payload is not valid base64 data.") from exc


def encode_audio_data_url(audio: bytes, media_type: str) -> str:
    """Encode raw audio bytes as a base64 `data:` URL."""

    encoded = base64.b64encode(audio).decode("ascii")
    return f"data:{media_type};base64,{encoded}"
