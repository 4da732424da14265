"""Command-line interface for Voicebank.

Responsibilities:
- Expose user-facing commands for serving the API and managing credentials.
- Convert CLI arguments into `VoicebankConfig` with runtime source precedence.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
import uvicorn

from .api.app import create_app
from .cli_rendering import echo_phrase_list, echo_runtime_summary, exit_with_command_error
from .cli_runtime import build_runtime_sources
from .config import ConfigLoader, VoicebankConfig
from .credentials import create_credential_store
from .errors import SpeechGenerationError
from .parsing import normalize_optional_string
from .store.seed import DEFAULT_TRAINING_PHRASES
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="voicebank",
    no_args_is_help=True,
    help="Voicebank CLI.",
)

_UVICORN_LOG_LEVELS = {
    "TRACE": "trace",
    "DEBUG": "debug",
    "INFO": "info",
    "SUCCESS": "info",
    "WARNING": "warning",
    "ERROR": "error",
}

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="YAML config file; environment variables are used otherwise."),
]
ProviderOption = Annotated[
    str | None,
    typer.Option("--provider", help="Voice cloning provider (`elevenlabs` or `mock`)."),
]
ModelOption = Annotated[
    str | None,
    typer.Option("--model", help="Provider synthesis model identifier."),
]
ApiKeyOption = Annotated[
    str | None,
    typer.Option("--api-key", help="ElevenLabs API key for this run."),
]
VoiceIdOption = Annotated[
    str | None,
    typer.Option("--voice-id", help="Reuse an existing ElevenLabs voice id."),
]
PromptApiKeyOption = Annotated[
    bool,
    typer.Option("--prompt-api-key", help="Prompt for the API key with hidden input."),
]
StoreApiKeyOption = Annotated[
    bool,
    typer.Option("--store-api-key", help="Persist an entered API key in secure storage."),
]


def _load_base_config(config_path: Path | None) -> VoicebankConfig:
    """Load YAML config when requested, else environment config, as stage errors."""

    if config_path is None:
        try:
            return ConfigLoader.from_env()
        except ValueError as exc:
            raise SpeechGenerationError(
                stage="config",
                detail=f"Invalid environment configuration: {exc}",
                hint="Fix the `VOICEBANK_*` environment variables and rerun.",
            ) from exc

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise SpeechGenerationError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise SpeechGenerationError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except Exception as exc:
        raise SpeechGenerationError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc


def _resolve_command_config(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    provider: str | None,
    model: str | None,
    api_key: str | None,
    voice_id: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
) -> VoicebankConfig:
    """Resolve effective command config from file/env defaults and CLI overrides."""

    base_config = _load_base_config(config_path)
    runtime_sources = build_runtime_sources(
        {
            "provider_tts": provider,
            "model_tts": model,
            "api_key": api_key,
            "voice_id": voice_id,
        },
        prompt_api_key=prompt_api_key,
        store_api_key=store_api_key,
        credential_store_factory=create_credential_store,
    )
    config = replace(
        base_config,
        host=normalize_optional_string(host) or base_config.host,
        port=port if port is not None else base_config.port,
        runtime_sources=runtime_sources,
        extra=dict(base_config.extra),
    )
    try:
        config.validate()
        config.resolved_provider_runtime()
    except ValueError as exc:
        raise SpeechGenerationError(
            stage="config",
            detail=str(exc),
            hint="Check `--provider`, `--model`, `--port`, and the config file values.",
        ) from exc
    return config


@app.command("serve")
def serve_command(
    config_path: ConfigOption = None,
    host: Annotated[str | None, typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Listen port.")] = None,
    provider: ProviderOption = None,
    model: ModelOption = None,
    api_key: ApiKeyOption = None,
    voice_id: VoiceIdOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = False,
) -> None:
    """Serve the REST API with an in-memory sample store."""

    try:
        config = _resolve_command_config(
            config_path,
            host,
            port,
            provider,
            model,
            api_key,
            voice_id,
            prompt_api_key,
            store_api_key,
        )
        run_logger = RunLogger(level=config.log_level)
        application = create_app(config, run_logger=run_logger)
    except Exception as exc:
        exit_with_command_error("serve", exc)

    echo_runtime_summary(config, config.resolved_provider_runtime())
    uvicorn.run(
        application,
        host=config.host,
        port=config.port,
        log_level=_UVICORN_LOG_LEVELS.get(config.log_level, "info"),
    )


@app.command("show-config")
def show_config_command(
    config_path: ConfigOption = None,
    provider: ProviderOption = None,
    model: ModelOption = None,
    voice_id: VoiceIdOption = None,
) -> None:
    """Print the resolved configuration without secret values."""

    try:
        config = _resolve_command_config(
            config_path,
            None,
            None,
            provider,
            model,
            None,
            voice_id,
            prompt_api_key=False,
            store_api_key=False,
        )
        runtime = config.resolved_provider_runtime()
    except Exception as exc:
        exit_with_command_error("show-config", exc)

    echo_runtime_summary(config, runtime)


@app.command("phrases")
def phrases_command() -> None:
    """List the training phrases every new store starts with."""

    echo_phrase_list(DEFAULT_TRAINING_PHRASES)


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Clear stored API key from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage the securely stored ElevenLabs API key."""

    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            SpeechGenerationError(
                stage="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = normalize_optional_string(
            typer.prompt(
                "ElevenLabs API key (hidden input)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                SpeechGenerationError(
                    stage="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(prompted_api_key)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                SpeechGenerationError(
                    stage="credentials",
                    detail=f"Failed to store API key securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("API key stored in secure credential storage.")
        return

    if clear_api_key:
        removed = credential_store.clear_api_key()
        if removed:
            typer.echo("Stored API key cleared from secure credential storage.")
        else:
            typer.echo("No stored API key found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    has_stored_key = credential_store.get_api_key() is not None
    status = "present" if has_stored_key else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored ElevenLabs API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
