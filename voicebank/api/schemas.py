"""Request body models for the REST API.

Bodies use the camelCase keys the browser client sends; unknown keys are
ignored. Each model converts itself into the store-level input record.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..models.datatypes import (
    DEFAULT_PHRASE_CATEGORY,
    DEFAULT_PHRASE_DIFFICULTY,
    DEFAULT_RECORDING_QUALITY,
    PhraseInput,
    PhraseUpdate,
    RecordingInput,
    TtsGenerationInput,
)


Quality = Literal["good", "fair", "poor"]
Difficulty = Literal["easy", "medium", "hard"]


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)


class RecordingCreate(_RequestModel):
    phrase_id: int = Field(alias="phraseId")
    audio_data: str = Field(alias="audioData", min_length=1)
    duration: int = Field(ge=0)
    quality: Quality = DEFAULT_RECORDING_QUALITY

    def to_input(self) -> RecordingInput:
        return RecordingInput(
            phrase_id=self.phrase_id,
            audio_data=self.audio_data,
            duration=self.duration,
            quality=self.quality,
        )


class PhraseCreate(_RequestModel):
    text: str = Field(min_length=1)
    category: str = Field(default=DEFAULT_PHRASE_CATEGORY, min_length=1)
    difficulty: Difficulty = DEFAULT_PHRASE_DIFFICULTY

    def to_input(self) -> PhraseInput:
        return PhraseInput(text=self.text, category=self.category, difficulty=self.difficulty)


class PhrasePatch(_RequestModel):
    text: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    difficulty: Optional[Difficulty] = None
    is_recorded: Optional[bool] = Field(default=None, alias="isRecorded")
    recording_id: Optional[int] = Field(default=None, alias="recordingId")

    def to_update(self) -> PhraseUpdate:
        """Translate an explicit `recordingId: null` into a link reset."""

        return PhraseUpdate(
            text=self.text,
            category=self.category,
            difficulty=self.difficulty,
            is_recorded=self.is_recorded,
            recording_id=self.recording_id,
            clear_recording=(
                "recording_id" in self.model_fields_set and self.recording_id is None
            ),
        )


class TtsGenerationCreate(_RequestModel):
    """Speech request; `inputText` is stored verbatim since duration counts its length."""

    model_config = ConfigDict(str_strip_whitespace=False)

    input_text: str = Field(alias="inputText", min_length=1)
    speed: Optional[str] = None
    pitch: Optional[str] = None

    @field_validator("input_text")
    @classmethod
    def _reject_blank_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must contain non-whitespace text")
        return value

    def to_input(self) -> TtsGenerationInput:
        return TtsGenerationInput(input_text=self.input_text, speed=self.speed, pitch=self.pitch)


def validation_issues(exc: ValidationError) -> list[dict[str, object]]:
    """Flatten pydantic errors into JSON-safe `{path, message, code}` entries."""

    return [
        {
            "path": [str(part) for part in error["loc"]],
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]
