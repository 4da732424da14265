"""ElevenLabs REST client used by the voice cloning synthesizer."""

from .client import DEFAULT_BASE_URL, ElevenLabsClient, ElevenLabsProviderError

__all__ = ["DEFAULT_BASE_URL", "ElevenLabsClient", "ElevenLabsProviderError"]
