"""Keyring-backed storage for the ElevenLabs API key.

The CLI can persist the key once (`voicebank credentials --set-api-key`) so
that later `serve` runs pick it up without exporting `ELEVENLABS_API_KEY`.
Secret values are never logged or echoed.
"""

from __future__ import annotations

from types import ModuleType
from typing import Callable, Protocol

from .parsing import normalize_optional_string


SERVICE_NAME = "voicebank"
API_KEY_ACCOUNT = "elevenlabs_api_key"


class CredentialStore(Protocol):
    """Persistence for the provider API key."""

    def is_available(self) -> bool: ...

    def get_api_key(self) -> str | None: ...

    def set_api_key(self, api_key: str) -> None: ...

    def clear_api_key(self) -> bool: ...


def _import_keyring() -> ModuleType | None:
    try:
        import keyring
    except ImportError:
        return None
    return keyring


class KeyringCredentialStore:
    """Store the API key in the operating system keychain via `keyring`."""

    def __init__(
        self,
        service_name: str = SERVICE_NAME,
        account_name: str = API_KEY_ACCOUNT,
        backend_loader: Callable[[], ModuleType | None] = _import_keyring,
    ) -> None:
        self.service_name = service_name
        self.account_name = account_name
        self._backend_loader = backend_loader

    def _backend(self) -> ModuleType | None:
        return self._backend_loader()

    def is_available(self) -> bool:
        """Return `True` when a keyring backend can be loaded."""

        return self._backend() is not None

    def get_api_key(self) -> str | None:
        """Return the stored key, or `None` when missing or unreadable."""

        backend = self._backend()
        if backend is None:
            return None
        try:
            value = backend.get_password(self.service_name, self.account_name)
        except backend.errors.KeyringError:
            return None
        return normalize_optional_string(value)

    def set_api_key(self, api_key: str) -> None:
        """Persist a non-blank key.

        Raises:
            ValueError: If `api_key` is blank.
            RuntimeError: If no keyring backend is installed.
        """

        normalized = normalize_optional_string(api_key)
        if normalized is None:
            raise ValueError("API key must be a non-empty string.")

        backend = self._backend()
        if backend is None:
            raise RuntimeError(
                "Secure credential storage is unavailable because `keyring` is not "
                "installed. Install `keyring` to persist API keys securely."
            )
        backend.set_password(self.service_name, self.account_name, normalized)

    def clear_api_key(self) -> bool:
        """Delete the stored key and report whether one was removed."""

        backend = self._backend()
        if backend is None or self.get_api_key() is None:
            return False
        try:
            backend.delete_password(self.service_name, self.account_name)
        except backend.errors.PasswordDeleteError:
            return False
        return True


def create_credential_store() -> CredentialStore:
    """Create the default secure credential store implementation."""

    return KeyringCredentialStore()
