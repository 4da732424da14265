"""Shared pytest fixtures for the full Voicebank test suite."""

from __future__ import annotations

import base64
import io
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from voicebank.models.datatypes import RecordingInput
from voicebank.store.memory import MemoryStore
from voicebank.telemetry.logger import RunLogger

from tests.fakes import FakeSynthesizer


@pytest.fixture
def audio_data_url() -> str:
    """Provide a small browser-style recording data URL."""

    return "data:audio/webm;base64," + base64.b64encode(b"webm-bytes").decode("ascii")


@pytest.fixture
def ticking_clock() -> Callable[[], datetime]:
    """Provide a clock that advances one second per call."""

    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ticks = {"count": 0}

    def _clock() -> datetime:
        ticks["count"] += 1
        return start + timedelta(seconds=ticks["count"])

    return _clock


@pytest.fixture
def log_sink() -> io.StringIO:
    """Provide an in-memory sink for phase log lines."""

    return io.StringIO()


@pytest.fixture
def run_logger(log_sink: io.StringIO) -> RunLogger:
    """Provide a run logger writing to the in-memory sink."""

    return RunLogger(sink=log_sink)


@pytest.fixture
def fake_synthesizer() -> FakeSynthesizer:
    """Provide a configured fake provider."""

    return FakeSynthesizer()


@pytest.fixture
def populated_store(
    ticking_clock: Callable[[], datetime], audio_data_url: str
) -> MemoryStore:
    """Provide a seeded store with one recording for each of the ten phrases."""

    store = MemoryStore(clock=ticking_clock)
    for phrase in store.list_phrases():
        store.create_recording(
            RecordingInput(phrase_id=phrase.id, audio_data=audio_data_url, duration=4)
        )
    return store
