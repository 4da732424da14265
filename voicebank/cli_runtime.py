"""Provider override layers for CLI commands.

Command options become the `cli` layer, the keyring-stored API key becomes the
`secure` layer, and the process environment is the `env` layer. Prompting for
and persisting the API key also happen here so command wiring stays thin.
"""

from __future__ import annotations

import os
from typing import Callable, Mapping, Protocol

import typer

from .config import RUNTIME_ENV_KEYS, RuntimeConfigSources
from .credentials import create_credential_store
from .errors import SpeechGenerationError
from .parsing import normalize_optional_string


class ApiKeyStore(Protocol):
    """The part of a credential store that runtime resolution needs."""

    def get_api_key(self) -> str | None: ...

    def set_api_key(self, api_key: str) -> None: ...


def _prompt_for_api_key() -> str | None:
    return normalize_optional_string(
        typer.prompt(
            "ElevenLabs API key (hidden; leave blank to skip)",
            default="",
            hide_input=True,
            show_default=False,
        )
    )


def _persist_api_key(store: ApiKeyStore, api_key: str) -> None:
    try:
        store.set_api_key(api_key)
    except Exception as exc:
        raise SpeechGenerationError(
            stage="credentials",
            detail=f"Failed to store API key securely: {exc}",
            hint=(
                "Install and configure a keyring backend, or rerun without "
                "`--store-api-key` for one-off usage."
            ),
        ) from exc
    typer.echo("Stored API key in secure credential storage.")


def build_runtime_sources(
    overrides: Mapping[str, str | None],
    *,
    prompt_api_key: bool = False,
    store_api_key: bool = False,
    credential_store_factory: Callable[[], ApiKeyStore] = create_credential_store,
    env: Mapping[str, str] | None = None,
) -> RuntimeConfigSources:
    """Build the override layers for one command invocation.

    Args:
        overrides: Option values keyed by runtime key; blank values are dropped.
        prompt_api_key: Ask for the key interactively when no option gave one.
        store_api_key: Persist the CLI-provided key in secure storage.
        credential_store_factory: Creates the secure credential store.
        env: Environment layer; defaults to `os.environ`.

    Raises:
        SpeechGenerationError: If persisting the key fails.
    """

    cli_layer: dict[str, str] = {}
    for key in RUNTIME_ENV_KEYS:
        value = normalize_optional_string(overrides.get(key))
        if value is not None:
            cli_layer[key] = value

    if prompt_api_key and "api_key" not in cli_layer:
        prompted = _prompt_for_api_key()
        if prompted is not None:
            cli_layer["api_key"] = prompted

    store = credential_store_factory()
    stored_api_key = store.get_api_key()
    secure_layer = {"api_key": stored_api_key} if stored_api_key is not None else {}

    if store_api_key and "api_key" in cli_layer:
        _persist_api_key(store, cli_layer["api_key"])

    return RuntimeConfigSources(
        cli=cli_layer,
        secure=secure_layer,
        env=os.environ if env is None else env,
    )
