"""Shared typed data models for Voicebank.

This package contains dataclasses used by the store, workflow, and API layers
to avoid cross-module coupling and circular imports.
"""

from .datatypes import (
    Phrase,
    PhraseInput,
    PhraseUpdate,
    ProgressStats,
    Recording,
    RecordingInput,
    TtsGeneration,
    TtsGenerationInput,
)

__all__ = [
    "Phrase",
    "PhraseInput",
    "PhraseUpdate",
    "ProgressStats",
    "Recording",
    "RecordingInput",
    "TtsGeneration",
    "TtsGenerationInput",
]
