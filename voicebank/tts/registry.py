"""Remote voice identifier registry.

The cloned voice id is kept in the process environment so that later
requests, and child processes, reuse the voice instead of creating a new one.
"""

from __future__ import annotations

import os
from typing import MutableMapping, Protocol

from ..parsing import normalize_optional_string


CUSTOM_VOICE_ID_ENV = "CUSTOM_VOICE_ID"


class VoiceRegistry(Protocol):
    """Lookup and storage of the provisioned remote voice id."""

    def get_voice_id(self) -> str | None:
        """Return the stored voice id, if any."""

    def set_voice_id(self, voice_id: str) -> None:
        """Remember a newly provisioned voice id."""

    def clear_voice_id(self) -> bool:
        """Forget the stored voice id and report whether one existed."""


class EnvironmentVoiceRegistry:
    """Voice registry backed by an environment variable mapping."""

    def __init__(
        self,
        env: MutableMapping[str, str] | None = None,
        key: str = CUSTOM_VOICE_ID_ENV,
    ) -> None:
        """Bind the registry to `os.environ` unless another mapping is given."""

        self._env: MutableMapping[str, str] = os.environ if env is None else env
        self.key = key

    def get_voice_id(self) -> str | None:
        """Return the normalized voice id from the environment."""

        return normalize_optional_string(self._env.get(self.key))

    def set_voice_id(self, voice_id: str) -> None:
        """Store a normalized voice id in the environment."""

        normalized = normalize_optional_string(voice_id)
        if normalized is None:
            raise ValueError("Voice id must be a non-empty string.")
        self._env[self.key] = normalized

    def clear_voice_id(self) -> bool:
        """Remove the voice id from the environment."""

        existed = self.get_voice_id() is not None
        self._env.pop(self.key, None)
        return existed
