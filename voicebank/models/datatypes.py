"""Core datatypes shared across Voicebank modules.

Responsibilities:
- Represent immutable records held by the in-memory store.
- Map records to the camelCase JSON payloads served by the REST API.

Key types:
- `Phrase`, `Recording`, `TtsGeneration`, their input counterparts,
  `PhraseUpdate`, and `ProgressStats`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


DEFAULT_PHRASE_CATEGORY = "training"
DEFAULT_PHRASE_DIFFICULTY = "medium"
DEFAULT_RECORDING_QUALITY = "good"
DEFAULT_TTS_SPEED = "1.0"
DEFAULT_TTS_PITCH = "1.0"


def _isoformat(value: datetime) -> str:
    """Serialize timestamps in ISO-8601 form with millisecond precision.

    UTC timestamps use the `Z` suffix that browser `Date` parsing produces.
    """

    text = value.isoformat(timespec="milliseconds")
    if text.endswith("+00:00"):
        return f"{text[:-6]}Z"
    return text


@dataclass(frozen=True, slots=True)
class Phrase:
    """A prompted phrase the user reads aloud.

    Attributes:
        id: Store-assigned identifier, starting at 1.
        text: Phrase text shown to the speaker.
        category: Grouping label, `training` for seeded phrases.
        is_recorded: Whether at least one recording references this phrase.
        recording_id: Identifier of the linked recording, when recorded.
        difficulty: `easy`, `medium`, or `hard`.
        created_at: Creation timestamp (UTC).
    """

    id: int
    text: str
    created_at: datetime
    category: str = DEFAULT_PHRASE_CATEGORY
    is_recorded: bool = False
    recording_id: int | None = None
    difficulty: str = DEFAULT_PHRASE_DIFFICULTY

    def to_payload(self) -> dict[str, object]:
        """Return the JSON payload for API responses."""

        return {
            "id": self.id,
            "text": self.text,
            "category": self.category,
            "isRecorded": self.is_recorded,
            "recordingId": self.recording_id,
            "difficulty": self.difficulty,
            "createdAt": _isoformat(self.created_at),
        }


@dataclass(frozen=True, slots=True)
class Recording:
    """A recorded voice sample for one phrase.

    Attributes:
        id: Store-assigned identifier, starting at 1.
        phrase_id: Identifier of the phrase that was read.
        audio_data: Base64 audio data URL, e.g. `data:audio/webm;base64,...`.
        duration: Clip length in whole seconds.
        quality: `good`, `fair`, or `poor`.
        created_at: Creation timestamp (UTC).
    """

    id: int
    phrase_id: int
    audio_data: str
    duration: int
    created_at: datetime
    quality: str = DEFAULT_RECORDING_QUALITY

    def to_payload(self) -> dict[str, object]:
        """Return the JSON payload for API responses."""

        return {
            "id": self.id,
            "phraseId": self.phrase_id,
            "audioData": self.audio_data,
            "duration": self.duration,
            "quality": self.quality,
            "createdAt": _isoformat(self.created_at),
        }


@dataclass(frozen=True, slots=True)
class TtsGeneration:
    """Synthesized speech produced with the cloned voice."""

    id: int
    input_text: str
    audio_data: str
    duration: int
    created_at: datetime
    speed: str = DEFAULT_TTS_SPEED
    pitch: str = DEFAULT_TTS_PITCH

    def to_payload(self) -> dict[str, object]:
        """Return the JSON payload for API responses."""

        return {
            "id": self.id,
            "inputText": self.input_text,
            "audioData": self.audio_data,
            "speed": self.speed,
            "pitch": self.pitch,
            "duration": self.duration,
            "createdAt": _isoformat(self.created_at),
        }


@dataclass(frozen=True, slots=True)
class RecordingInput:
    """Client-provided fields for a new recording."""

    phrase_id: int
    audio_data: str
    duration: int
    quality: str = DEFAULT_RECORDING_QUALITY


@dataclass(frozen=True, slots=True)
class PhraseInput:
    """Client-provided fields for a new phrase."""

    text: str
    category: str = DEFAULT_PHRASE_CATEGORY
    difficulty: str = DEFAULT_PHRASE_DIFFICULTY


@dataclass(frozen=True, slots=True)
class PhraseUpdate:
    """Partial phrase update; `None` fields are left unchanged.

    `clear_recording` resets `recording_id` to `None`, which cannot be
    expressed through the optional field alone.
    """

    text: str | None = None
    category: str | None = None
    difficulty: str | None = None
    is_recorded: bool | None = None
    recording_id: int | None = None
    clear_recording: bool = False


@dataclass(frozen=True, slots=True)
class TtsGenerationInput:
    """Client-provided fields for a speech generation request."""

    input_text: str
    speed: str | None = None
    pitch: str | None = None


@dataclass(frozen=True, slots=True)
class ProgressStats:
    """Sample collection progress shown on the dashboard."""

    recorded: int
    total: int
    duration: int
    quality: str
    percentage: int

    def to_payload(self) -> dict[str, object]:
        """Return the JSON payload for API responses."""

        return {
            "recorded": self.recorded,
            "total": self.total,
            "duration": self.duration,
            "quality": self.quality,
            "percentage": self.percentage,
        }
