"""Unit tests for YAML/environment configuration loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from voicebank.config import ConfigLoader, RuntimeConfigSources, VoicebankConfig


def test_config_loader_from_yaml_loads_and_normalizes_values(tmp_path: Path) -> None:
    """YAML loader should parse valid payloads and normalize typed/blank values."""

    config_path = tmp_path / "voicebank.yml"
    config_path.write_text(
        """
host: " 0.0.0.0 "
port: "8080"
provider_tts: " mock "
api_key: " test-key "
model_tts: " eleven_multilingual_v2 "
voice_id: "   "
voice_name: " Studio Voice "
min_samples: 5
timeout_seconds: "12.5"
seed_default_phrases: " no "
log_level: debug
extra:
  profile: " nightly "
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert config.provider_tts == "mock"
    assert config.api_key == "test-key"
    assert config.model_tts == "eleven_multilingual_v2"
    assert config.voice_id is None
    assert config.voice_name == "Studio Voice"
    assert config.voice_description == "Custom voice model created from user recordings"
    assert config.min_samples == 5
    assert config.timeout_seconds == 12.5
    assert config.seed_default_phrases is False
    assert config.log_level == "DEBUG"
    assert config.extra == {"profile": "nightly"}


def test_config_loader_from_yaml_attaches_environment_layer(tmp_path: Path) -> None:
    """Provider variables from the environment override YAML provider values."""

    config_path = tmp_path / "voicebank.yml"
    config_path.write_text("api_key: yaml-key\nvoice_id: yaml-voice\n", encoding="utf-8")

    config = ConfigLoader.from_yaml(
        config_path, env={"ELEVENLABS_API_KEY": "env-key", "VOICEBANK_PORT": "9000"}
    )
    runtime = config.resolved_provider_runtime()

    assert config.runtime_sources.env == {"ELEVENLABS_API_KEY": "env-key"}
    assert config.port == 5000
    assert runtime.api_key == "env-key"
    assert runtime.voice_id == "yaml-voice"

    fallback = ConfigLoader.from_yaml(config_path, env={})
    assert fallback.resolved_provider_runtime().api_key == "yaml-key"


def test_config_loader_from_yaml_accepts_empty_file(tmp_path: Path) -> None:
    """An empty YAML file yields the defaults."""

    config_path = tmp_path / "empty.yml"
    config_path.write_text("", encoding="utf-8")

    config = ConfigLoader.from_yaml(config_path)

    assert config.provider_tts == "elevenlabs"
    assert config.min_samples == 10
    assert config.model_tts == "eleven_monolingual_v1"


def test_config_loader_from_yaml_rejects_unknown_keys(tmp_path: Path) -> None:
    """Unknown keys fail fast with the key names listed."""

    config_path = tmp_path / "bad.yml"
    config_path.write_text("provider_tts: mock\nvoice_speed: fast\n", encoding="utf-8")

    with pytest.raises(ValueError, match="unsupported key\\(s\\): voice_speed"):
        ConfigLoader.from_yaml(config_path)


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("min_samples: 0\n", "`min_samples` must be a positive integer"),
        ("port: true\n", "`port` must be a positive integer"),
        ("timeout_seconds: -1\n", "`timeout_seconds` must be a positive number"),
        ("seed_default_phrases: maybe\n", "`seed_default_phrases` must be a boolean"),
        ("provider_tts: openai\n", "Unsupported `provider_tts` value `openai`"),
        ("- a\n- b\n", "top-level mapping"),
    ],
)
def test_config_loader_from_yaml_rejects_invalid_values(
    tmp_path: Path, content: str, message: str
) -> None:
    """Invalid typed values raise actionable errors."""

    config_path = tmp_path / "invalid.yml"
    config_path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_env_reads_prefixed_variables() -> None:
    """Environment loader should read `VOICEBANK_*` and provider variables."""

    config = ConfigLoader.from_env(
        {
            "VOICEBANK_HOST": "0.0.0.0",
            "VOICEBANK_PORT": "9000",
            "VOICEBANK_PROVIDER_TTS": "mock",
            "VOICEBANK_MIN_SAMPLES": "3",
            "VOICEBANK_SEED_DEFAULT_PHRASES": "false",
            "ELEVENLABS_API_KEY": " env-key ",
            "CUSTOM_VOICE_ID": "voice-123",
            "UNRELATED": "ignored",
        }
    )

    assert config.host == "0.0.0.0"
    assert config.port == 9000
    assert config.provider_tts == "mock"
    assert config.min_samples == 3
    assert config.seed_default_phrases is False
    assert config.api_key == "env-key"
    assert config.voice_id == "voice-123"
    assert "UNRELATED" not in config.runtime_sources.env
    assert config.runtime_sources.env["CUSTOM_VOICE_ID"] == "voice-123"


def test_config_loader_from_env_uses_defaults_for_empty_environment() -> None:
    """An empty environment yields a valid default config."""

    config = ConfigLoader.from_env({})

    assert config.host == "127.0.0.1"
    assert config.port == 5000
    assert config.api_key is None


def test_resolved_provider_runtime_precedence_cli_secure_env_default() -> None:
    """Runtime resolution should prefer CLI, then secure storage, then env, then defaults."""

    config = VoicebankConfig(api_key="config-key", model_tts="config-model")
    sources = RuntimeConfigSources(
        cli={"provider_tts": "mock"},
        secure={"api_key": "secure-key"},
        env={
            "ELEVENLABS_API_KEY": "env-key",
            "VOICEBANK_PROVIDER_TTS": "elevenlabs",
            "CUSTOM_VOICE_ID": "env-voice",
        },
    )

    runtime = config.resolved_provider_runtime(sources)

    assert runtime.tts_provider == "mock"
    assert runtime.api_key == "secure-key"
    assert runtime.voice_id == "env-voice"
    assert runtime.tts_model == "config-model"


def test_resolved_provider_runtime_uses_attached_sources_by_default() -> None:
    """Without explicit sources the config's own runtime sources apply."""

    config = VoicebankConfig(
        runtime_sources=RuntimeConfigSources(env={"ELEVENLABS_API_KEY": "attached-key"})
    )

    assert config.resolved_provider_runtime().api_key == "attached-key"


def test_display_metadata_never_contains_api_key() -> None:
    """Printable runtime metadata reports only whether a key is set."""

    runtime = VoicebankConfig(api_key="sk_secret").resolved_provider_runtime(RuntimeConfigSources())

    metadata = runtime.as_display_metadata()

    assert metadata["api_key"] == "set"
    assert "sk_secret" not in metadata.values()
