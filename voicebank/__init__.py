"""Top-level package for Voicebank.

This package collects prompted voice samples in memory and turns them into a
cloned ElevenLabs voice for speech generation. The orchestration entry point
is `SpeechGenerationWorkflow`; `voicebank.api.app.create_app` serves it over
HTTP.
"""

__version__ = "0.3.0"

from .store.memory import MemoryStore
from .workflow import SpeechGenerationWorkflow

__all__ = ["MemoryStore", "SpeechGenerationWorkflow", "__version__"]
