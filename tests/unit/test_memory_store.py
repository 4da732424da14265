"""Unit tests for the in-memory phrase, recording, and generation store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from voicebank.models.datatypes import PhraseInput, PhraseUpdate, RecordingInput
from voicebank.store.memory import MemoryStore
from voicebank.store.seed import DEFAULT_TRAINING_PHRASES


def test_new_store_is_seeded_with_default_training_phrases() -> None:
    """A default store starts with the ten training phrases in order."""

    store = MemoryStore()
    phrases = store.list_phrases()

    assert [phrase.id for phrase in phrases] == list(range(1, 11))
    assert [phrase.text for phrase in phrases] == list(DEFAULT_TRAINING_PHRASES)
    assert all(phrase.category == "training" for phrase in phrases)
    assert all(phrase.difficulty == "medium" for phrase in phrases)
    assert all(not phrase.is_recorded and phrase.recording_id is None for phrase in phrases)


def test_seeding_can_be_disabled() -> None:
    """Seeding is optional."""

    assert MemoryStore(seed_default_phrases=False).list_phrases() == []


def test_create_recording_links_phrase(audio_data_url: str) -> None:
    """Creating a recording marks its phrase as recorded with the new id."""

    store = MemoryStore()
    recording = store.create_recording(
        RecordingInput(phrase_id=3, audio_data=audio_data_url, duration=5)
    )

    phrase = store.get_phrase(3)
    assert recording.id == 1
    assert recording.quality == "good"
    assert phrase is not None
    assert phrase.is_recorded is True
    assert phrase.recording_id == recording.id


def test_recording_for_unknown_phrase_is_still_stored(audio_data_url: str) -> None:
    """Unknown phrase ids do not prevent storing the recording."""

    store = MemoryStore()
    recording = store.create_recording(
        RecordingInput(phrase_id=999, audio_data=audio_data_url, duration=2)
    )

    assert store.get_recording(recording.id) == recording
    assert store.get_phrase(999) is None


def test_list_recordings_is_newest_first(
    ticking_clock: Callable[[], datetime], audio_data_url: str
) -> None:
    """Recordings are listed by creation time descending."""

    store = MemoryStore(clock=ticking_clock)
    for phrase_id in (1, 2, 3):
        store.create_recording(
            RecordingInput(phrase_id=phrase_id, audio_data=audio_data_url, duration=1)
        )

    assert [recording.id for recording in store.list_recordings()] == [3, 2, 1]


def test_equal_timestamps_fall_back_to_id_order(audio_data_url: str) -> None:
    """Recordings created in the same instant are ordered by id descending."""

    instant = datetime(2024, 5, 1, tzinfo=timezone.utc)
    store = MemoryStore(clock=lambda: instant)
    for phrase_id in (1, 2):
        store.create_recording(
            RecordingInput(phrase_id=phrase_id, audio_data=audio_data_url, duration=1)
        )

    assert [recording.id for recording in store.list_recordings()] == [2, 1]


def test_delete_recording_clears_phrase_link(audio_data_url: str) -> None:
    """Deleting the only recording of a phrase marks it unrecorded."""

    store = MemoryStore()
    recording = store.create_recording(
        RecordingInput(phrase_id=1, audio_data=audio_data_url, duration=3)
    )

    assert store.delete_recording(recording.id) is True
    phrase = store.get_phrase(1)
    assert phrase is not None
    assert phrase.is_recorded is False
    assert phrase.recording_id is None
    assert store.delete_recording(recording.id) is False


def test_delete_recording_resets_phrase_with_remaining_recordings(
    ticking_clock: Callable[[], datetime], audio_data_url: str
) -> None:
    """The phrase is reset even though an older recording of it survives."""

    store = MemoryStore(clock=ticking_clock)
    first = store.create_recording(
        RecordingInput(phrase_id=1, audio_data=audio_data_url, duration=1)
    )
    second = store.create_recording(
        RecordingInput(phrase_id=1, audio_data=audio_data_url, duration=2)
    )

    store.delete_recording(second.id)

    phrase = store.get_phrase(1)
    assert phrase is not None
    assert phrase.is_recorded is False
    assert phrase.recording_id is None
    assert store.list_recordings_for_phrase(1) == [first]


def test_identifiers_are_never_reused(audio_data_url: str) -> None:
    """Ids keep increasing after deletions."""

    store = MemoryStore(seed_default_phrases=False)
    phrase = store.create_phrase(PhraseInput(text="One"))
    store.delete_phrase(phrase.id)
    replacement = store.create_phrase(PhraseInput(text="Two"))

    recording = store.create_recording(
        RecordingInput(phrase_id=replacement.id, audio_data=audio_data_url, duration=1)
    )
    store.delete_recording(recording.id)
    next_recording = store.create_recording(
        RecordingInput(phrase_id=replacement.id, audio_data=audio_data_url, duration=1)
    )

    assert replacement.id == 2
    assert next_recording.id == 2


def test_update_phrase_merges_fields_and_keeps_identity() -> None:
    """Updates change only the provided fields."""

    store = MemoryStore()
    original = store.get_phrase(1)
    updated = store.update_phrase(1, PhraseUpdate(text="New text", difficulty="hard"))

    assert original is not None and updated is not None
    assert updated.id == 1
    assert updated.created_at == original.created_at
    assert updated.text == "New text"
    assert updated.difficulty == "hard"
    assert updated.category == original.category
    assert store.update_phrase(404, PhraseUpdate(text="x")) is None


def test_update_phrase_can_clear_recording_link(audio_data_url: str) -> None:
    """An explicit clear resets the recording id."""

    store = MemoryStore()
    store.create_recording(RecordingInput(phrase_id=1, audio_data=audio_data_url, duration=1))

    updated = store.update_phrase(1, PhraseUpdate(is_recorded=False, clear_recording=True))

    assert updated is not None
    assert updated.is_recorded is False
    assert updated.recording_id is None


def test_tts_generation_lifecycle(ticking_clock: Callable[[], datetime]) -> None:
    """Generations are stored, listed newest first, and deletable."""

    store = MemoryStore(clock=ticking_clock)
    first = store.create_tts_generation(
        input_text="Hello",
        speed="1.0",
        pitch="1.0",
        audio_data="data:audio/mpeg;base64,AA==",
        duration=0,
    )
    second = store.create_tts_generation(
        input_text="World",
        speed="1.5",
        pitch="0.8",
        audio_data="data:audio/mpeg;base64,AA==",
        duration=0,
    )

    assert store.get_tts_generation(first.id) == first
    assert store.list_tts_generations() == [second, first]
    assert store.delete_tts_generation(first.id) is True
    assert store.delete_tts_generation(first.id) is False
    assert store.list_tts_generations() == [second]
