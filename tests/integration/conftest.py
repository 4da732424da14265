"""Integration-test fixtures for deterministic provider behavior."""

from __future__ import annotations

import io
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from voicebank.api.app import create_app
from voicebank.config import VoicebankConfig
from voicebank.telemetry.logger import RunLogger
from voicebank.tts.registry import EnvironmentVoiceRegistry


@pytest.fixture(autouse=True)
def _block_elevenlabs_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fail loudly if an integration test reaches the real ElevenLabs API."""

    def _unexpected_post(url: str, **_kwargs: object) -> None:
        raise AssertionError(f"Unexpected network request to {url}")

    monkeypatch.setattr("voicebank.elevenlabs.client.requests.post", _unexpected_post)


@pytest.fixture
def voice_env() -> dict[str, str]:
    """Provide an isolated mapping standing in for the process environment."""

    return {}


@pytest.fixture
def api_log_sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_client(
    voice_env: dict[str, str], api_log_sink: io.StringIO
) -> Callable[..., TestClient]:
    """Build a test client for a config with an isolated voice registry."""

    def _make(config: VoicebankConfig | None = None) -> TestClient:
        app = create_app(
            config or VoicebankConfig(provider_tts="mock"),
            registry=EnvironmentVoiceRegistry(env=voice_env),
            run_logger=RunLogger(sink=api_log_sink),
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    """Provide a client backed by the offline mock provider."""

    return make_client()
