"""Integration tests for CLI commands and secure credential flows."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from voicebank.cli import app
from voicebank.store.seed import DEFAULT_TRAINING_PHRASES

_RUNTIME_ENV_KEYS = (
    "ELEVENLABS_API_KEY",
    "CUSTOM_VOICE_ID",
    "VOICEBANK_HOST",
    "VOICEBANK_PORT",
    "VOICEBANK_PROVIDER_TTS",
    "VOICEBANK_MODEL_TTS",
    "VOICEBANK_MIN_SAMPLES",
    "VOICEBANK_LOG_LEVEL",
)


class InMemoryCredentialStore:
    """Simple in-memory credential store used for CLI tests."""

    def __init__(self, initial_api_key: str | None = None) -> None:
        """Initialize the store with an optional pre-seeded API key."""

        self._api_key = initial_api_key

    def is_available(self) -> bool:
        """Return availability flag expected by the CLI status command."""

        return True

    def get_api_key(self) -> str | None:
        """Return currently stored API key value."""

        return self._api_key

    def set_api_key(self, api_key: str) -> None:
        """Persist a normalized API key value."""

        self._api_key = api_key.strip()

    def clear_api_key(self) -> bool:
        """Clear API key and return whether one existed."""

        existed = self._api_key is not None
        self._api_key = None
        return existed


@pytest.fixture(autouse=True)
def _clean_runtime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _RUNTIME_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def credential_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCredentialStore:
    store = InMemoryCredentialStore()
    monkeypatch.setattr("voicebank.cli.create_credential_store", lambda: store)
    return store


def test_phrases_command_lists_training_phrases() -> None:
    result = CliRunner().invoke(app, ["phrases"])

    assert result.exit_code == 0, result.output
    assert f"1. {DEFAULT_TRAINING_PHRASES[0]}" in result.output
    assert f"10. {DEFAULT_TRAINING_PHRASES[9]}" in result.output


def test_show_config_prefers_cli_then_secure_then_env(
    monkeypatch: pytest.MonkeyPatch, credential_store: InMemoryCredentialStore
) -> None:
    """CLI options override env values and stored keys are reported without leaking."""

    credential_store.set_api_key("stored-secret")
    monkeypatch.setenv("VOICEBANK_PROVIDER_TTS", "elevenlabs")
    monkeypatch.setenv("CUSTOM_VOICE_ID", "env-voice")

    result = CliRunner().invoke(
        app, ["show-config", "--provider", "mock", "--model", "eleven_turbo_v2"]
    )

    assert result.exit_code == 0, result.output
    assert "provider_tts: mock" in result.output
    assert "model_tts: eleven_turbo_v2" in result.output
    assert "voice_id: env-voice" in result.output
    assert "api_key: set" in result.output
    assert "stored-secret" not in result.output


def test_show_config_reads_yaml_file(
    tmp_path: Path, credential_store: InMemoryCredentialStore
) -> None:
    _ = credential_store
    config_path = tmp_path / "voicebank.yml"
    config_path.write_text("port: 8123\nprovider_tts: mock\nmin_samples: 3\n", encoding="utf-8")

    result = CliRunner().invoke(app, ["show-config", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "Listen: http://127.0.0.1:8123" in result.output
    assert "min_samples: 3" in result.output
    assert "api_key: not set" in result.output


def test_show_config_reports_missing_config_file(
    tmp_path: Path, credential_store: InMemoryCredentialStore
) -> None:
    _ = credential_store
    missing = tmp_path / "missing.yml"

    result = CliRunner().invoke(app, ["show-config", "--config", str(missing)])

    assert result.exit_code == 1
    assert "show-config failed at stage `config`" in result.output
    assert "Config file not found" in result.output


def test_show_config_rejects_unknown_provider(credential_store: InMemoryCredentialStore) -> None:
    _ = credential_store

    result = CliRunner().invoke(app, ["show-config", "--provider", "openai"])

    assert result.exit_code == 1
    assert "Unsupported `provider_tts` value `openai`" in result.output


def test_serve_builds_app_and_starts_uvicorn(
    monkeypatch: pytest.MonkeyPatch, credential_store: InMemoryCredentialStore
) -> None:
    _ = credential_store
    captured: dict[str, object] = {}

    def _fake_run(application: object, **kwargs: object) -> None:
        captured["application"] = application
        captured.update(kwargs)

    monkeypatch.setattr("voicebank.cli.uvicorn.run", _fake_run)

    result = CliRunner().invoke(
        app, ["serve", "--provider", "mock", "--host", "0.0.0.0", "--port", "8080"]
    )

    assert result.exit_code == 0, result.output
    assert "Listen: http://0.0.0.0:8080" in result.output
    assert captured["host"] == "0.0.0.0"
    assert captured["port"] == 8080
    assert captured["log_level"] == "info"
    application = captured["application"]
    assert application.state.workflow.synthesizer.provider_id == "mock"
    assert len(application.state.store.list_phrases()) == 10


def test_serve_stores_api_key_when_requested(
    monkeypatch: pytest.MonkeyPatch, credential_store: InMemoryCredentialStore
) -> None:
    monkeypatch.setattr("voicebank.cli.uvicorn.run", lambda *_args, **_kwargs: None)

    result = CliRunner().invoke(
        app, ["serve", "--api-key", "sk-cli-key", "--store-api-key"]
    )

    assert result.exit_code == 0, result.output
    assert "Stored API key in secure credential storage." in result.output
    assert credential_store.get_api_key() == "sk-cli-key"
    assert "sk-cli-key" not in result.output


def test_credentials_set_status_and_clear(credential_store: InMemoryCredentialStore) -> None:
    runner = CliRunner()

    status = runner.invoke(app, ["credentials"])
    assert status.exit_code == 0, status.output
    assert "Secure credential storage: available" in status.output
    assert "Stored ElevenLabs API key: not set" in status.output

    stored = runner.invoke(app, ["credentials", "--set-api-key"], input="secret-key\n")
    assert stored.exit_code == 0, stored.output
    assert "API key stored in secure credential storage." in stored.output
    assert credential_store.get_api_key() == "secret-key"
    assert "secret-key" not in stored.output

    status = runner.invoke(app, ["credentials"])
    assert "Stored ElevenLabs API key: present" in status.output

    cleared = runner.invoke(app, ["credentials", "--clear-api-key"])
    assert "Stored API key cleared from secure credential storage." in cleared.output
    assert credential_store.get_api_key() is None

    cleared_again = runner.invoke(app, ["credentials", "--clear-api-key"])
    assert "No stored API key found in secure credential storage." in cleared_again.output


def test_credentials_rejects_conflicting_actions(
    credential_store: InMemoryCredentialStore,
) -> None:
    _ = credential_store

    result = CliRunner().invoke(app, ["credentials", "--set-api-key", "--clear-api-key"])

    assert result.exit_code == 1
    assert "cannot be used together" in result.output
