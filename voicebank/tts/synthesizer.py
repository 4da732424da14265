"""Voice cloning synthesizer interfaces and provider implementations.

Responsibilities:
- Define the protocol the speech generation workflow drives.
- Provide an ElevenLabs-backed implementation.
- Provide a deterministic mock implementation that needs no credentials.
"""

from __future__ import annotations

import io
import wave
from typing import Protocol, Sequence

from ..elevenlabs.client import DEFAULT_BASE_URL, ElevenLabsClient
from .voices import VoiceProfile, VoiceSample


class VoiceCloneSynthesizer(Protocol):
    """Protocol for voice cloning provider implementations."""

    provider_id: str
    audio_media_type: str

    def is_configured(self) -> bool:
        """Return whether the provider can accept requests."""

    def create_voice(self, profile: VoiceProfile, samples: Sequence[VoiceSample]) -> str:
        """Create a remote voice from samples and return its id."""

    def add_sample(self, voice_id: str, sample: VoiceSample) -> None:
        """Upload one more sample to an existing remote voice."""

    def synthesize(self, voice_id: str, text: str, profile: VoiceProfile) -> bytes:
        """Return audio bytes of `text` spoken in the remote voice."""


class ElevenLabsVoiceCloneSynthesizer:
    """ElevenLabs-backed synthesizer returning MPEG audio."""

    audio_media_type = "audio/mpeg"

    def __init__(
        self,
        api_key: str | None = None,
        provider_id: str = "elevenlabs",
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialize the HTTP client for ElevenLabs requests."""

        self.provider_id = provider_id
        self.client = ElevenLabsClient(
            api_key=api_key,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
        )

    def is_configured(self) -> bool:
        """Return `True` when an API key is available."""

        return self.client.has_api_key

    def create_voice(self, profile: VoiceProfile, samples: Sequence[VoiceSample]) -> str:
        """Create an instant voice clone from every sample."""

        return self.client.add_voice(
            name=profile.name,
            description=profile.description,
            files=[(sample.filename, sample.audio) for sample in samples],
        )

    def add_sample(self, voice_id: str, sample: VoiceSample) -> None:
        """Upload one sample to the cloned voice."""

        self.client.add_voice_sample(
            voice_id=voice_id,
            filename=sample.filename,
            audio=sample.audio,
        )

    def synthesize(self, voice_id: str, text: str, profile: VoiceProfile) -> bytes:
        """Synthesize MPEG speech with the profile's model and settings."""

        return self.client.text_to_speech(
            voice_id=voice_id,
            text=text,
            model_id=profile.model_id,
            voice_settings=profile.settings.as_payload(),
        )


class MockVoiceCloneSynthesizer:
    """Offline synthesizer producing silent WAV clips of estimated length."""

    audio_media_type = "audio/wav"
    voice_id = "mock-voice"

    def __init__(
        self,
        provider_id: str = "mock",
        sample_rate: int = 8000,
        chars_per_second: int = 15,
    ) -> None:
        """Initialize mock clip parameters."""

        self.provider_id = provider_id
        self.sample_rate = sample_rate
        self.chars_per_second = chars_per_second
        self.uploaded_samples: list[str] = []

    def is_configured(self) -> bool:
        """The mock provider never needs credentials."""

        return True

    def create_voice(self, profile: VoiceProfile, samples: Sequence[VoiceSample]) -> str:
        """Return the fixed mock voice id."""

        _ = profile
        self.uploaded_samples = [sample.filename for sample in samples]
        return self.voice_id

    def add_sample(self, voice_id: str, sample: VoiceSample) -> None:
        """Record the sample filename."""

        _ = voice_id
        self.uploaded_samples.append(sample.filename)

    def synthesize(self, voice_id: str, text: str, profile: VoiceProfile) -> bytes:
        """Return mono 16-bit silence lasting about as long as `text` would."""

        _ = (voice_id, profile)
        seconds = max(1, len(text) // self.chars_per_second)
        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wav_file:
            wav_file.setnchannels(1)
            wav_file.setsampwidth(2)
            wav_file.setframerate(self.sample_rate)
            wav_file.writeframes(b"\x00\x00" * (self.sample_rate * seconds))
        return buffer.getvalue()
