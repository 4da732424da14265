"""Speech generation workflow.

Responsibilities:
- Check provider configuration and sample count before any remote call.
- Provision a cloned voice once and reuse its id for later requests.
- Synthesize speech, encode it as a data URL, and store the generation.

Key types:
- `SpeechGenerationWorkflow`: orchestration entry point used by the API.
"""

from __future__ import annotations

import math
import threading
from typing import Sequence

from .elevenlabs.client import ElevenLabsProviderError
from .errors import AudioPayloadError, SpeechGenerationError
from .models.datatypes import (
    DEFAULT_TTS_PITCH,
    DEFAULT_TTS_SPEED,
    Recording,
    TtsGeneration,
    TtsGenerationInput,
)
from .parsing import decode_audio_data, encode_audio_data_url, normalize_optional_string
from .store.memory import VoiceSampleStore
from .telemetry.logger import RunLogger
from .tts.registry import VoiceRegistry
from .tts.synthesizer import VoiceCloneSynthesizer
from .tts.voices import VoiceProfile, VoiceSample


DEFAULT_MIN_SAMPLES = 10
CHARS_PER_SECOND_ESTIMATE = 15

_FAILURE_HINTS = {
    "invalid_api_key": "Check `ELEVENLABS_API_KEY` or run `voicebank credentials --set-api-key`.",
    "quota_exceeded": "Check the ElevenLabs subscription character and voice quota.",
    "voice_not_found": "Check that the voice still exists in the ElevenLabs voice library.",
    "timeout": "Retry later or raise `timeout_seconds`.",
    "transport": "Check network connectivity to the ElevenLabs API.",
}


def estimate_duration_seconds(text: str) -> int:
    """Estimate spoken duration from text length at a typical speech rate."""

    return math.floor(len(text) / CHARS_PER_SECOND_ESTIMATE)


class SpeechGenerationWorkflow:
    """Turn collected recordings and input text into stored cloned-voice speech."""

    def __init__(
        self,
        store: VoiceSampleStore,
        synthesizer: VoiceCloneSynthesizer,
        registry: VoiceRegistry,
        profile: VoiceProfile | None = None,
        min_samples: int = DEFAULT_MIN_SAMPLES,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Wire store, provider, and voice registry collaborators."""

        self.store = store
        self.synthesizer = synthesizer
        self.registry = registry
        self.profile = profile or VoiceProfile()
        self.min_samples = min_samples
        self.run_logger = run_logger or RunLogger()
        self._provision_lock = threading.Lock()

    def generate(self, request: TtsGenerationInput) -> TtsGeneration:
        """Run the full generation sequence for one request."""

        self._require_configured()
        recordings = self._require_samples()
        voice_id = self.resolve_voice_id(recordings)

        audio = self._synthesize(voice_id, request.input_text)
        audio_data = encode_audio_data_url(audio, self.synthesizer.audio_media_type)

        generation = self.store.create_tts_generation(
            input_text=request.input_text,
            speed=normalize_optional_string(request.speed) or DEFAULT_TTS_SPEED,
            pitch=normalize_optional_string(request.pitch) or DEFAULT_TTS_PITCH,
            audio_data=audio_data,
            duration=estimate_duration_seconds(request.input_text),
        )
        self.run_logger.log_stage_complete(
            "generation",
            generation_id=generation.id,
            provider=self.synthesizer.provider_id,
        )
        return generation

    def resolve_voice_id(self, recordings: Sequence[Recording]) -> str:
        """Return the stored voice id, provisioning a new voice when absent.

        Concurrent callers are serialized so that only one remote voice is
        created per missing id.
        """

        with self._provision_lock:
            existing = self.registry.get_voice_id()
            if existing is not None:
                self.run_logger.log_stage_skip(
                    "voice_provision", reason="existing_voice", voice_id=existing
                )
                return existing
            return self._provision_voice(recordings)

    def _provision_voice(self, recordings: Sequence[Recording]) -> str:
        """Create a voice from every recording and remember its id."""

        samples = self._decode_samples(recordings)

        self.run_logger.log_stage_start("voice_provision", samples=len(samples))
        try:
            voice_id = self.synthesizer.create_voice(self.profile, samples)
        except ElevenLabsProviderError as exc:
            raise self._provider_failure("voice_provision", exc) from exc
        self.run_logger.log_stage_complete("voice_provision", voice_id=voice_id)

        self._upload_samples(voice_id, samples)

        self.registry.set_voice_id(voice_id)
        return voice_id

    def _require_configured(self) -> None:
        """Fail fast when the provider lacks credentials."""

        if self.synthesizer.is_configured():
            return
        self.run_logger.log_stage_failure("configuration", "missing_api_key")
        raise SpeechGenerationError(
            stage="configuration",
            detail="ElevenLabs API key is not configured",
            hint="Set `ELEVENLABS_API_KEY` or run `voicebank credentials --set-api-key`.",
        )

    def _require_samples(self) -> list[Recording]:
        """Return all recordings once enough have been collected."""

        recordings = self.store.list_recordings()
        if len(recordings) < self.min_samples:
            self.run_logger.log_stage_failure("samples", "not_enough_samples")
            raise SpeechGenerationError(
                stage="samples",
                detail=(
                    "Not enough voice samples. "
                    f"Please record at least {self.min_samples} phrases first."
                ),
                hint=f"{len(recordings)} of {self.min_samples} samples recorded.",
            )
        return recordings

    def _decode_samples(self, recordings: Sequence[Recording]) -> list[VoiceSample]:
        """Decode recording data URLs into uploadable samples."""

        samples: list[VoiceSample] = []
        for recording in recordings:
            try:
                audio = decode_audio_data(recording.audio_data)
            except AudioPayloadError as exc:
                self.run_logger.log_stage_failure("samples", "invalid_audio_payload")
                raise SpeechGenerationError(
                    stage="samples",
                    detail=f"Recording {recording.id} has unreadable audio data: {exc}",
                    hint="Delete the recording and record the phrase again.",
                ) from exc
            samples.append(
                VoiceSample(
                    recording_id=recording.id,
                    filename=f"sample_{recording.id}.mp3",
                    audio=audio,
                )
            )
        return samples

    def _upload_samples(self, voice_id: str, samples: Sequence[VoiceSample]) -> None:
        """Add every sample to the new voice; failed uploads are logged and skipped."""

        self.run_logger.log_stage_start("sample_upload", samples=len(samples), voice_id=voice_id)
        failed = 0
        for sample in samples:
            try:
                self.synthesizer.add_sample(voice_id, sample)
            except ElevenLabsProviderError as exc:
                failed += 1
                self.run_logger.log_stage_warning(
                    "sample_upload",
                    exc.failure_kind,
                    recording_id=sample.recording_id,
                )
        self.run_logger.log_stage_complete(
            "sample_upload",
            uploaded=len(samples) - failed,
            failed=failed,
        )

    def _synthesize(self, voice_id: str, text: str) -> bytes:
        """Synthesize text in the cloned voice and map provider failures."""

        self.run_logger.log_stage_start("synthesis", voice_id=voice_id, chars=len(text))
        try:
            audio = self.synthesizer.synthesize(voice_id, text, self.profile)
        except ElevenLabsProviderError as exc:
            hint = None
            if exc.failure_kind == "voice_not_found":
                self.registry.clear_voice_id()
                hint = "The stored voice id was cleared; the next request creates a new voice."
            raise self._provider_failure("synthesis", exc, hint=hint) from exc
        self.run_logger.log_stage_complete("synthesis", bytes=len(audio))
        return audio

    def _provider_failure(
        self, stage: str, exc: ElevenLabsProviderError, hint: str | None = None
    ) -> SpeechGenerationError:
        """Log a provider failure and convert it to a stage error."""

        self.run_logger.log_stage_failure(stage, exc.failure_kind)
        return SpeechGenerationError(
            stage=stage,
            detail=str(exc),
            hint=hint or _FAILURE_HINTS.get(exc.failure_kind),
            failure_kind=exc.failure_kind,
        )
