"""Configuration model and loaders for Voicebank.

Settings come from a YAML file or from the process environment. Provider
values (`provider_tts`, `model_tts`, `api_key`, `voice_id`) can additionally
be overridden per run: CLI options win over the secure credential store, which
wins over environment variables, which win over the loaded config values.

Key types:
- `VoicebankConfig`: normalized settings for one server process.
- `ProviderRuntimeConfig`: resolved provider/model/credential values.
- `RuntimeConfigSources`: the CLI, secure-storage, and env override layers.
- `ConfigLoader`: YAML and environment entry points.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml

from .elevenlabs.client import DEFAULT_BASE_URL
from .parsing import normalize_optional_string, parse_permissive_boolean
from .tts.voices import DEFAULT_TTS_MODEL, DEFAULT_VOICE_DESCRIPTION, DEFAULT_VOICE_NAME
from .workflow import DEFAULT_MIN_SAMPLES


SUPPORTED_PROVIDERS = ("elevenlabs", "mock")
SUPPORTED_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR")

# Provider runtime keys and the environment variable each one falls back to.
RUNTIME_ENV_KEYS: dict[str, str] = {
    "provider_tts": "VOICEBANK_PROVIDER_TTS",
    "model_tts": "VOICEBANK_MODEL_TTS",
    "api_key": "ELEVENLABS_API_KEY",
    "voice_id": "CUSTOM_VOICE_ID",
}


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Override layers consulted when resolving provider settings.

    `cli` and `secure` are keyed by runtime key (`api_key`, ...); `env` is
    keyed by environment variable name (`ELEVENLABS_API_KEY`, ...).
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)

    def lookup(self, key: str) -> str | None:
        """Return the highest-precedence non-blank value for a runtime key."""

        for layer, layer_key in (
            (self.cli, key),
            (self.secure, key),
            (self.env, RUNTIME_ENV_KEYS[key]),
        ):
            value = normalize_optional_string(layer.get(layer_key))
            if value is not None:
                return value
        return None


@dataclass(frozen=True, slots=True)
class ProviderRuntimeConfig:
    """Resolved provider settings for one server process."""

    tts_provider: str
    tts_model: str
    api_key: str | None = None
    voice_id: str | None = None

    def as_display_metadata(self) -> dict[str, str]:
        """Return non-secret runtime metadata safe to print or log."""

        return {
            "provider_tts": self.tts_provider,
            "model_tts": self.tts_model,
            "api_key": "set" if self.api_key else "not set",
            "voice_id": self.voice_id or "(provisioned on first request)",
        }


@dataclass(slots=True)
class VoicebankConfig:
    """Settings for one Voicebank server process.

    Attributes:
        host: Interface the HTTP server binds to.
        port: TCP port the HTTP server listens on.
        provider_tts: Voice cloning provider identifier.
        api_key: Optional ElevenLabs API key.
        model_tts: Synthesis model identifier.
        voice_id: Optional existing remote voice id to reuse.
        voice_name: Display name for newly created remote voices.
        voice_description: Description for newly created remote voices.
        min_samples: Recordings required before speech can be generated.
        base_url: ElevenLabs API base URL.
        timeout_seconds: Per-request HTTP timeout.
        seed_default_phrases: Whether the store starts with training phrases.
        log_level: loguru level for phase logs.
        runtime_sources: Provider overrides injected by the CLI.
        extra: Free-form string metadata carried from the config file.
    """

    host: str = "127.0.0.1"
    port: int = 5000
    provider_tts: str = "elevenlabs"
    api_key: str | None = None
    model_tts: str = DEFAULT_TTS_MODEL
    voice_id: str | None = None
    voice_name: str = DEFAULT_VOICE_NAME
    voice_description: str = DEFAULT_VOICE_DESCRIPTION
    min_samples: int = DEFAULT_MIN_SAMPLES
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 60.0
    seed_default_phrases: bool = True
    log_level: str = "INFO"
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)
    extra: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise `ValueError` for settings the server cannot start with."""

        for name in ("host", "model_tts", "voice_name", "base_url"):
            if normalize_optional_string(getattr(self, name)) is None:
                raise ValueError(f"`{name}` must be a non-empty string.")
        if not 0 < self.port < 65536:
            raise ValueError("`port` must be between 1 and 65535.")
        _check_provider(self.provider_tts)
        if self.min_samples <= 0:
            raise ValueError("`min_samples` must be a positive integer.")
        if self.timeout_seconds <= 0:
            raise ValueError("`timeout_seconds` must be a positive number.")
        if self.log_level.upper() not in SUPPORTED_LOG_LEVELS:
            raise ValueError(f"`log_level` must be one of: {', '.join(SUPPORTED_LOG_LEVELS)}.")

    def resolved_provider_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> ProviderRuntimeConfig:
        """Resolve provider settings; `sources` defaults to `runtime_sources`."""

        layers = sources if sources is not None else self.runtime_sources
        values = {
            key: layers.lookup(key) or normalize_optional_string(getattr(self, key))
            for key in RUNTIME_ENV_KEYS
        }
        for required in ("provider_tts", "model_tts"):
            if values[required] is None:
                raise ValueError(
                    f"`{required}` could not be resolved from CLI, secure storage, env, "
                    "or defaults."
                )
        _check_provider(values["provider_tts"])
        return ProviderRuntimeConfig(
            tts_provider=values["provider_tts"],
            tts_model=values["model_tts"],
            api_key=values["api_key"],
            voice_id=values["voice_id"],
        )


def _check_provider(provider_id: str) -> None:
    if provider_id not in SUPPORTED_PROVIDERS:
        raise ValueError(
            f"Unsupported `provider_tts` value `{provider_id}`. "
            f"Supported: {', '.join(SUPPORTED_PROVIDERS)}."
        )


def _as_text(raw: object) -> str:
    return str(raw).strip()


def _as_positive_int(raw: object) -> int:
    if isinstance(raw, bool):
        raise ValueError("must be a positive integer.")
    try:
        value = raw if isinstance(raw, int) else int(_as_text(raw))
    except ValueError as exc:
        raise ValueError("must be a positive integer.") from exc
    if value <= 0:
        raise ValueError("must be a positive integer.")
    return value


def _as_positive_float(raw: object) -> float:
    if isinstance(raw, bool):
        raise ValueError("must be a positive number.")
    try:
        value = float(raw) if isinstance(raw, (int, float)) else float(_as_text(raw))
    except ValueError as exc:
        raise ValueError("must be a positive number.") from exc
    if value <= 0:
        raise ValueError("must be a positive number.")
    return value


def _as_flag(raw: object) -> bool:
    parsed = parse_permissive_boolean(raw)
    if parsed is None:
        raise ValueError("must be a boolean value (`true`/`false`, `1`/`0`, `yes`/`no`).")
    return parsed


def _as_level(raw: object) -> str:
    return _as_text(raw).upper()


@dataclass(frozen=True, slots=True)
class _Setting:
    """One scalar config field: its YAML key, env variable, and parser."""

    name: str
    env_key: str
    parse: Callable[[object], Any] = _as_text


_SETTINGS = (
    _Setting("host", "VOICEBANK_HOST"),
    _Setting("port", "VOICEBANK_PORT", _as_positive_int),
    _Setting("provider_tts", RUNTIME_ENV_KEYS["provider_tts"]),
    _Setting("api_key", RUNTIME_ENV_KEYS["api_key"]),
    _Setting("model_tts", RUNTIME_ENV_KEYS["model_tts"]),
    _Setting("voice_id", RUNTIME_ENV_KEYS["voice_id"]),
    _Setting("voice_name", "VOICEBANK_VOICE_NAME"),
    _Setting("voice_description", "VOICEBANK_VOICE_DESCRIPTION"),
    _Setting("min_samples", "VOICEBANK_MIN_SAMPLES", _as_positive_int),
    _Setting("base_url", "VOICEBANK_BASE_URL"),
    _Setting("timeout_seconds", "VOICEBANK_TIMEOUT_SECONDS", _as_positive_float),
    _Setting("seed_default_phrases", "VOICEBANK_SEED_DEFAULT_PHRASES", _as_flag),
    _Setting("log_level", "VOICEBANK_LOG_LEVEL", _as_level),
)


class ConfigLoader:
    """Factory methods for creating `VoicebankConfig` from external sources."""

    @staticmethod
    def from_yaml(path: Path, env: Mapping[str, str] | None = None) -> VoicebankConfig:
        """Create a validated config from a YAML file.

        Provider variables in `env` (default `os.environ`) are attached as the
        environment override layer, so `ELEVENLABS_API_KEY` wins over `api_key`.

        Raises:
            FileNotFoundError: If `path` does not exist.
            ValueError: If the document is not a mapping, names unknown keys,
                or holds invalid values.
        """

        label = f"YAML `{path}`"
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")

        known = {setting.name for setting in _SETTINGS} | {"extra"}
        unknown = sorted(str(key) for key in payload if key not in known)
        if unknown:
            raise ValueError(f"{label} includes unsupported key(s): {', '.join(unknown)}.")

        values = _parse_settings(payload, label, key_of=lambda setting: setting.name)
        config = VoicebankConfig(
            **values,
            runtime_sources=RuntimeConfigSources(env=_runtime_env(env)),
            extra=_parse_extra(payload.get("extra"), label),
        )
        config.validate()
        return config

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> VoicebankConfig:
        """Create a validated config from `VOICEBANK_*` and provider variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        values = _parse_settings(env_map, "Environment", key_of=lambda setting: setting.env_key)
        config = VoicebankConfig(
            **values, runtime_sources=RuntimeConfigSources(env=_runtime_env(env_map))
        )
        config.validate()
        return config


def _runtime_env(env: Mapping[str, str] | None) -> dict[str, str]:
    """Keep the non-blank provider variables from `env` (default `os.environ`)."""

    env_map: Mapping[str, str] = os.environ if env is None else env
    return {
        env_key: env_map[env_key]
        for env_key in RUNTIME_ENV_KEYS.values()
        if normalize_optional_string(env_map.get(env_key)) is not None
    }


def _parse_settings(
    source: Mapping[str, Any], label: str, key_of: Callable[[_Setting], str]
) -> dict[str, Any]:
    """Parse every present, non-blank setting; absent ones keep their defaults."""

    values: dict[str, Any] = {}
    for setting in _SETTINGS:
        key = key_of(setting)
        raw = source.get(key)
        if normalize_optional_string(raw) is None:
            continue
        try:
            values[setting.name] = setting.parse(raw)
        except ValueError as exc:
            raise ValueError(f"{label} field `{key}` {exc}") from exc
    return values


def _parse_extra(raw: object, label: str) -> dict[str, str]:
    """Parse the optional `extra` mapping of non-blank strings."""

    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"{label} field `extra` must be a mapping/object.")

    extra: dict[str, str] = {}
    for raw_key, raw_value in raw.items():
        key = normalize_optional_string(raw_key)
        value = normalize_optional_string(raw_value)
        if key is None or value is None:
            raise ValueError(f"{label} field `extra` contains a blank key or value.")
        extra[key] = value
    return extra
