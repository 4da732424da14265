"""Process-lifetime storage for phrases, recordings, and generations."""

from .memory import MemoryStore, VoiceSampleStore
from .seed import DEFAULT_TRAINING_PHRASES

__all__ = ["DEFAULT_TRAINING_PHRASES", "MemoryStore", "VoiceSampleStore"]
