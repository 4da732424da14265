"""Voice profile models for voice cloning and synthesis.

Responsibilities:
- Describe the remote voice to create from collected samples.
- Carry provider tuning values for speech synthesis.
- Decouple workflow logic from provider-specific payload naming.
"""

from __future__ import annotations

from dataclasses import dataclass, field


DEFAULT_VOICE_NAME = "Custom Voice"
DEFAULT_VOICE_DESCRIPTION = "Custom voice model created from user recordings"
DEFAULT_TTS_MODEL = "eleven_monolingual_v1"


@dataclass(frozen=True, slots=True)
class VoiceSettings:
    """Provider voice tuning used for every synthesis request.

    Attributes:
        stability: Lower values allow more expressive variation.
        similarity_boost: How closely output should match the cloned samples.
        style: Style exaggeration amount.
        use_speaker_boost: Whether to boost similarity to the original speaker.
    """

    stability: float = 0.5
    similarity_boost: float = 0.75
    style: float = 0.0
    use_speaker_boost: bool = True

    def as_payload(self) -> dict[str, object]:
        """Return the provider request representation."""

        return {
            "stability": self.stability,
            "similarity_boost": self.similarity_boost,
            "style": self.style,
            "use_speaker_boost": self.use_speaker_boost,
        }


@dataclass(frozen=True, slots=True)
class VoiceProfile:
    """Declarative description of the cloned voice.

    Attributes:
        name: Remote voice display name.
        description: Remote voice description.
        model_id: Provider synthesis model identifier.
        settings: Synthesis tuning values.
    """

    name: str = DEFAULT_VOICE_NAME
    description: str = DEFAULT_VOICE_DESCRIPTION
    model_id: str = DEFAULT_TTS_MODEL
    settings: VoiceSettings = field(default_factory=VoiceSettings)


@dataclass(frozen=True, slots=True)
class VoiceSample:
    """One decoded recording ready for upload."""

    recording_id: int
    filename: str
    audio: bytes
