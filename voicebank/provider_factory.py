"""Provider factory helpers for the voice cloning stage.

Responsibilities:
- Resolve provider identifiers to concrete synthesizer implementations.
- Keep the workflow independent from concrete provider class construction.
"""

from __future__ import annotations

from .elevenlabs.client import DEFAULT_BASE_URL
from .tts.synthesizer import (
    ElevenLabsVoiceCloneSynthesizer,
    MockVoiceCloneSynthesizer,
    VoiceCloneSynthesizer,
)


class ProviderFactory:
    """Factory for provider-backed synthesizers used by the workflow."""

    @staticmethod
    def create_voice_clone_synthesizer(
        provider_id: str,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 60.0,
    ) -> VoiceCloneSynthesizer:
        """Create a synthesizer for a configured provider identifier."""

        if provider_id == "elevenlabs":
            return ElevenLabsVoiceCloneSynthesizer(
                api_key=api_key,
                provider_id=provider_id,
                base_url=base_url,
                timeout_seconds=timeout_seconds,
            )
        if provider_id == "mock":
            return MockVoiceCloneSynthesizer(provider_id=provider_id)
        raise ValueError(f"Unsupported TTS provider `{provider_id}`.")
