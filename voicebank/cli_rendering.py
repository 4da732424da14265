"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
resolved runtime settings, and phrase listings.
"""

from __future__ import annotations

from typing import NoReturn, Sequence

import typer

from .config import ProviderRuntimeConfig, VoicebankConfig
from .errors import SpeechGenerationError


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, SpeechGenerationError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_runtime_summary(config: VoicebankConfig, runtime: ProviderRuntimeConfig) -> None:
    """Print server and provider settings without secret values."""

    typer.echo(f"Listen: http://{config.host}:{config.port}")
    for key, value in sorted(runtime.as_display_metadata().items()):
        typer.echo(f"{key}: {value}")
    typer.echo(f"min_samples: {config.min_samples}")
    typer.echo(f"seed_default_phrases: {'true' if config.seed_default_phrases else 'false'}")


def echo_phrase_list(phrases: Sequence[str]) -> None:
    """Print numbered phrase rows."""

    for index, text in enumerate(phrases, start=1):
        typer.echo(f"{index}. {text}")
