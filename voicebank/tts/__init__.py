"""Voice cloning provider abstractions.

This package contains voice profile types, the remote voice id registry, and
synthesizer implementations used by the speech generation workflow.
"""

from .registry import EnvironmentVoiceRegistry, VoiceRegistry
from .synthesizer import (
    ElevenLabsVoiceCloneSynthesizer,
    MockVoiceCloneSynthesizer,
    VoiceCloneSynthesizer,
)
from .voices import VoiceProfile, VoiceSample, VoiceSettings

__all__ = [
    "ElevenLabsVoiceCloneSynthesizer",
    "EnvironmentVoiceRegistry",
    "MockVoiceCloneSynthesizer",
    "VoiceCloneSynthesizer",
    "VoiceProfile",
    "VoiceRegistry",
    "VoiceSample",
    "VoiceSettings",
]
