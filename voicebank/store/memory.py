"""In-memory store for phrases, recordings, and speech generations.

Responsibilities:
- Hold the three entity maps for the lifetime of the process.
- Assign monotonically increasing identifiers per entity type.
- Keep phrase recording links consistent as recordings come and go.

Key types:
- `VoiceSampleStore`: protocol consumed by the workflow and API layers.
- `MemoryStore`: lock-guarded dictionary implementation.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterable, Protocol

from ..models.datatypes import (
    Phrase,
    PhraseInput,
    PhraseUpdate,
    Recording,
    RecordingInput,
    TtsGeneration,
)
from .seed import default_phrase_inputs


def _utc_now() -> datetime:
    """Return the current UTC timestamp."""

    return datetime.now(timezone.utc)


class VoiceSampleStore(Protocol):
    """Storage operations used by the workflow and REST layers."""

    def create_recording(self, recording: RecordingInput) -> Recording:
        """Store a recording and link it to its phrase."""

    def get_recording(self, recording_id: int) -> Recording | None:
        """Return one recording by id."""

    def list_recordings(self) -> list[Recording]:
        """Return all recordings, newest first."""

    def list_recordings_for_phrase(self, phrase_id: int) -> list[Recording]:
        """Return recordings of one phrase in insertion order."""

    def delete_recording(self, recording_id: int) -> bool:
        """Delete a recording and report whether it existed."""

    def create_phrase(self, phrase: PhraseInput) -> Phrase:
        """Store a new, not yet recorded phrase."""

    def get_phrase(self, phrase_id: int) -> Phrase | None:
        """Return one phrase by id."""

    def list_phrases(self) -> list[Phrase]:
        """Return all phrases ordered by id."""

    def update_phrase(self, phrase_id: int, updates: PhraseUpdate) -> Phrase | None:
        """Merge updates into a phrase and return the new value."""

    def delete_phrase(self, phrase_id: int) -> bool:
        """Delete a phrase and report whether it existed."""

    def create_tts_generation(
        self,
        *,
        input_text: str,
        speed: str,
        pitch: str,
        audio_data: str,
        duration: int,
    ) -> TtsGeneration:
        """Store a synthesized speech result."""

    def get_tts_generation(self, generation_id: int) -> TtsGeneration | None:
        """Return one speech generation by id."""

    def list_tts_generations(self) -> list[TtsGeneration]:
        """Return all speech generations, newest first."""

    def delete_tts_generation(self, generation_id: int) -> bool:
        """Delete a speech generation and report whether it existed."""


class MemoryStore:
    """Process-lifetime store backed by plain dictionaries."""

    def __init__(
        self,
        *,
        seed_default_phrases: bool = True,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize empty entity maps and optionally seed training phrases."""

        self._lock = threading.RLock()
        self._clock = clock
        self._recordings: dict[int, Recording] = {}
        self._phrases: dict[int, Phrase] = {}
        self._tts_generations: dict[int, TtsGeneration] = {}
        self._next_recording_id = 1
        self._next_phrase_id = 1
        self._next_tts_id = 1

        if seed_default_phrases:
            self.seed_phrases(default_phrase_inputs())

    def seed_phrases(self, phrases: Iterable[PhraseInput]) -> list[Phrase]:
        """Create several phrases in order and return them."""

        return [self.create_phrase(phrase) for phrase in phrases]

    # Recordings

    def create_recording(self, recording: RecordingInput) -> Recording:
        """Store a recording and mark its phrase as recorded when it exists."""

        with self._lock:
            recording_id = self._next_recording_id
            self._next_recording_id += 1
            stored = Recording(
                id=recording_id,
                phrase_id=recording.phrase_id,
                audio_data=recording.audio_data,
                duration=recording.duration,
                quality=recording.quality,
                created_at=self._clock(),
            )
            self._recordings[recording_id] = stored

            phrase = self._phrases.get(recording.phrase_id)
            if phrase is not None:
                self._phrases[phrase.id] = replace(
                    phrase, is_recorded=True, recording_id=recording_id
                )
            return stored

    def get_recording(self, recording_id: int) -> Recording | None:
        """Return one recording by id."""

        with self._lock:
            return self._recordings.get(recording_id)

    def list_recordings(self) -> list[Recording]:
        """Return all recordings, newest first."""

        with self._lock:
            return _newest_first(self._recordings.values())

    def list_recordings_for_phrase(self, phrase_id: int) -> list[Recording]:
        """Return recordings of one phrase in insertion order."""

        with self._lock:
            return [
                recording
                for recording in self._recordings.values()
                if recording.phrase_id == phrase_id
            ]

    def delete_recording(self, recording_id: int) -> bool:
        """Delete a recording and mark its phrase as not recorded.

        The phrase is reset even when other recordings of it remain; the
        client re-records or re-links it through a phrase update.
        """

        with self._lock:
            recording = self._recordings.pop(recording_id, None)
            if recording is None:
                return False

            phrase = self._phrases.get(recording.phrase_id)
            if phrase is not None:
                self._phrases[phrase.id] = replace(phrase, is_recorded=False, recording_id=None)
            return True

    # Phrases

    def create_phrase(self, phrase: PhraseInput) -> Phrase:
        """Store a new, not yet recorded phrase."""

        with self._lock:
            phrase_id = self._next_phrase_id
            self._next_phrase_id += 1
            stored = Phrase(
                id=phrase_id,
                text=phrase.text,
                category=phrase.category,
                difficulty=phrase.difficulty,
                created_at=self._clock(),
            )
            self._phrases[phrase_id] = stored
            return stored

    def get_phrase(self, phrase_id: int) -> Phrase | None:
        """Return one phrase by id."""

        with self._lock:
            return self._phrases.get(phrase_id)

    def list_phrases(self) -> list[Phrase]:
        """Return all phrases ordered by id."""

        with self._lock:
            return sorted(self._phrases.values(), key=lambda phrase: phrase.id)

    def update_phrase(self, phrase_id: int, updates: PhraseUpdate) -> Phrase | None:
        """Merge non-empty update fields into a phrase."""

        with self._lock:
            phrase = self._phrases.get(phrase_id)
            if phrase is None:
                return None

            changes: dict[str, object] = {}
            if updates.text is not None:
                changes["text"] = updates.text
            if updates.category is not None:
                changes["category"] = updates.category
            if updates.difficulty is not None:
                changes["difficulty"] = updates.difficulty
            if updates.is_recorded is not None:
                changes["is_recorded"] = updates.is_recorded
            if updates.clear_recording:
                changes["recording_id"] = None
            elif updates.recording_id is not None:
                changes["recording_id"] = updates.recording_id

            updated = replace(phrase, **changes)
            self._phrases[phrase_id] = updated
            return updated

    def delete_phrase(self, phrase_id: int) -> bool:
        """Delete a phrase; its recordings are kept."""

        with self._lock:
            return self._phrases.pop(phrase_id, None) is not None

    # TTS generations

    def create_tts_generation(
        self,
        *,
        input_text: str,
        speed: str,
        pitch: str,
        audio_data: str,
        duration: int,
    ) -> TtsGeneration:
        """Store a synthesized speech result."""

        with self._lock:
            generation_id = self._next_tts_id
            self._next_tts_id += 1
            stored = TtsGeneration(
                id=generation_id,
                input_text=input_text,
                speed=speed,
                pitch=pitch,
                audio_data=audio_data,
                duration=duration,
                created_at=self._clock(),
            )
            self._tts_generations[generation_id] = stored
            return stored

    def get_tts_generation(self, generation_id: int) -> TtsGeneration | None:
        """Return one speech generation by id."""

        with self._lock:
            return self._tts_generations.get(generation_id)

    def list_tts_generations(self) -> list[TtsGeneration]:
        """Return all speech generations, newest first."""

        with self._lock:
            return _newest_first(self._tts_generations.values())

    def delete_tts_generation(self, generation_id: int) -> bool:
        """Delete a speech generation and report whether it existed."""

        with self._lock:
            return self._tts_generations.pop(generation_id, None) is not None


def _newest_first(records: Iterable[Recording] | Iterable[TtsGeneration]) -> list:
    """Sort records by creation time descending, breaking ties by id."""

    return sorted(records, key=lambda record: (record.created_at, record.id), reverse=True)
