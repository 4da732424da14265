"""FastAPI application exposing the sample store and speech generation.

Responsibilities:
- Wire config, store, provider, voice registry, and workflow together.
- Map store lookups, validation failures, and workflow errors onto the
  JSON responses the browser client expects.

Key public functions:
- `create_app`: build a configured FastAPI application.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from .. import __version__
from ..config import VoicebankConfig
from ..errors import AudioPayloadError, SpeechGenerationError
from ..models.datatypes import Recording
from ..parsing import data_url_media_type, decode_audio_data
from ..provider_factory import ProviderFactory
from ..stats import compute_progress
from ..store.memory import MemoryStore, VoiceSampleStore
from ..telemetry.logger import RunLogger
from ..tts.registry import EnvironmentVoiceRegistry, VoiceRegistry
from ..tts.voices import VoiceProfile
from ..workflow import SpeechGenerationWorkflow
from .schemas import (
    PhraseCreate,
    PhrasePatch,
    RecordingCreate,
    TtsGenerationCreate,
    validation_issues,
)


T = TypeVar("T")


def _parse_id(raw_id: str) -> int | None:
    """Parse a path identifier; non-numeric ids behave like unknown ids."""

    try:
        return int(raw_id)
    except ValueError:
        return None


def _message(status_code: int, message: str, **extra: object) -> JSONResponse:
    """Build a `{"message": ...}` JSON response."""

    return JSONResponse(status_code=status_code, content={"message": message, **extra})


def build_workflow(
    config: VoicebankConfig,
    store: VoiceSampleStore,
    run_logger: RunLogger,
    registry: VoiceRegistry | None = None,
) -> SpeechGenerationWorkflow:
    """Resolve provider settings and assemble the generation workflow."""

    runtime = config.resolved_provider_runtime()
    synthesizer = ProviderFactory.create_voice_clone_synthesizer(
        runtime.tts_provider,
        api_key=runtime.api_key,
        base_url=config.base_url,
        timeout_seconds=config.timeout_seconds,
    )
    voice_registry = registry if registry is not None else EnvironmentVoiceRegistry()
    if runtime.voice_id is not None and voice_registry.get_voice_id() is None:
        voice_registry.set_voice_id(runtime.voice_id)

    profile = VoiceProfile(
        name=config.voice_name,
        description=config.voice_description,
        model_id=runtime.tts_model,
    )
    return SpeechGenerationWorkflow(
        store=store,
        synthesizer=synthesizer,
        registry=voice_registry,
        profile=profile,
        min_samples=config.min_samples,
        run_logger=run_logger,
    )


def create_app(
    config: VoicebankConfig | None = None,
    *,
    store: VoiceSampleStore | None = None,
    workflow: SpeechGenerationWorkflow | None = None,
    registry: VoiceRegistry | None = None,
    run_logger: RunLogger | None = None,
) -> FastAPI:
    """Create the REST application; collaborators default from `config`."""

    resolved_config = config if config is not None else VoicebankConfig()
    resolved_config.validate()
    logger = run_logger or RunLogger(level=resolved_config.log_level)
    sample_store = store if store is not None else MemoryStore(
        seed_default_phrases=resolved_config.seed_default_phrases
    )
    generation_workflow = workflow or build_workflow(
        resolved_config, sample_store, logger, registry=registry
    )

    app = FastAPI(title="Voicebank", version=__version__)
    app.state.config = resolved_config
    app.state.store = sample_store
    app.state.workflow = generation_workflow

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        _ = request
        errors = [
            {
                "path": [str(part) for part in error.get("loc", ())],
                "message": error.get("msg", ""),
                "code": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        return _message(400, "Invalid request", errors=errors)

    def guarded(action: str, operation: Callable[[], T]) -> T | JSONResponse:
        """Run a store operation and map unexpected failures to HTTP 500."""

        try:
            return operation()
        except Exception as exc:
            logger.log_stage_failure("api", type(exc).__name__)
            return _message(500, f"Failed to {action}")

    def guarded_by_id(
        action: str, raw_id: str, operation: Callable[[int], T]
    ) -> T | None | JSONResponse:
        """Run an id-keyed store operation; non-numeric ids yield `None`."""

        parsed_id = _parse_id(raw_id)
        if parsed_id is None:
            return None
        return guarded(action, lambda: operation(parsed_id))

    def audio_response(audio_data: str, action: str) -> Response:
        """Decode a stored data URL into a playable audio response."""

        try:
            audio = decode_audio_data(audio_data)
        except AudioPayloadError as exc:
            logger.log_stage_failure("api", type(exc).__name__)
            return _message(500, f"Failed to {action}")
        return Response(content=audio, media_type=data_url_media_type(audio_data))

    # Recordings

    @app.get("/api/recordings")
    def list_recordings() -> Any:
        result = guarded("fetch recordings", sample_store.list_recordings)
        if isinstance(result, JSONResponse):
            return result
        return [recording.to_payload() for recording in result]

    @app.get("/api/recordings/{recording_id}")
    def get_recording(recording_id: str) -> Any:
        recording = guarded_by_id("fetch recording", recording_id, sample_store.get_recording)
        if isinstance(recording, JSONResponse):
            return recording
        if recording is None:
            return _message(404, "Recording not found")
        return recording.to_payload()

    @app.get("/api/recordings/{recording_id}/audio")
    def get_recording_audio(recording_id: str) -> Any:
        recording = guarded_by_id("fetch recording", recording_id, sample_store.get_recording)
        if isinstance(recording, JSONResponse):
            return recording
        if recording is None:
            return _message(404, "Recording not found")
        return audio_response(recording.audio_data, "decode recording audio")

    @app.post("/api/recordings", status_code=201)
    def create_recording(payload: Any = Body(default=None)) -> Any:
        try:
            body = RecordingCreate.model_validate(payload)
        except ValidationError as exc:
            return _message(400, "Invalid recording data", errors=validation_issues(exc))
        result = guarded(
            "create recording", lambda: sample_store.create_recording(body.to_input())
        )
        if isinstance(result, JSONResponse):
            return result
        return result.to_payload()

    @app.delete("/api/recordings/{recording_id}")
    def delete_recording(recording_id: str) -> Any:
        deleted = guarded_by_id("delete recording", recording_id, sample_store.delete_recording)
        if isinstance(deleted, JSONResponse):
            return deleted
        if not deleted:
            return _message(404, "Recording not found")
        return {"message": "Recording deleted successfully"}

    # Phrases

    @app.get("/api/phrases")
    def list_phrases() -> Any:
        result = guarded("fetch phrases", sample_store.list_phrases)
        if isinstance(result, JSONResponse):
            return result
        return [phrase.to_payload() for phrase in result]

    @app.get("/api/phrases/{phrase_id}")
    def get_phrase(phrase_id: str) -> Any:
        phrase = guarded_by_id("fetch phrase", phrase_id, sample_store.get_phrase)
        if isinstance(phrase, JSONResponse):
            return phrase
        if phrase is None:
            return _message(404, "Phrase not found")
        return phrase.to_payload()

    @app.get("/api/phrases/{phrase_id}/recordings")
    def list_phrase_recordings(phrase_id: str) -> Any:
        def fetch(parsed_id: int) -> list[Recording] | None:
            if sample_store.get_phrase(parsed_id) is None:
                return None
            return sample_store.list_recordings_for_phrase(parsed_id)

        recordings = guarded_by_id("fetch phrase recordings", phrase_id, fetch)
        if isinstance(recordings, JSONResponse):
            return recordings
        if recordings is None:
            return _message(404, "Phrase not found")
        return [recording.to_payload() for recording in recordings]

    @app.post("/api/phrases", status_code=201)
    def create_phrase(payload: Any = Body(default=None)) -> Any:
        try:
            body = PhraseCreate.model_validate(payload)
        except ValidationError as exc:
            return _message(400, "Invalid phrase data", errors=validation_issues(exc))
        result = guarded("create phrase", lambda: sample_store.create_phrase(body.to_input()))
        if isinstance(result, JSONResponse):
            return result
        return result.to_payload()

    @app.patch("/api/phrases/{phrase_id}")
    def update_phrase(phrase_id: str, payload: Any = Body(default=None)) -> Any:
        try:
            body = PhrasePatch.model_validate(payload)
        except ValidationError as exc:
            return _message(400, "Invalid phrase data", errors=validation_issues(exc))
        phrase = guarded_by_id(
            "update phrase",
            phrase_id,
            lambda parsed_id: sample_store.update_phrase(parsed_id, body.to_update()),
        )
        if isinstance(phrase, JSONResponse):
            return phrase
        if phrase is None:
            return _message(404, "Phrase not found")
        return phrase.to_payload()

    @app.delete("/api/phrases/{phrase_id}")
    def delete_phrase(phrase_id: str) -> Any:
        deleted = guarded_by_id("delete phrase", phrase_id, sample_store.delete_phrase)
        if isinstance(deleted, JSONResponse):
            return deleted
        if not deleted:
            return _message(404, "Phrase not found")
        return {"message": "Phrase deleted successfully"}

    # TTS generations

    @app.get("/api/tts-generations")
    def list_tts_generations() -> Any:
        result = guarded("fetch TTS generations", sample_store.list_tts_generations)
        if isinstance(result, JSONResponse):
            return result
        return [generation.to_payload() for generation in result]

    @app.get("/api/tts-generations/{generation_id}")
    def get_tts_generation(generation_id: str) -> Any:
        generation = guarded_by_id(
            "fetch TTS generation", generation_id, sample_store.get_tts_generation
        )
        if isinstance(generation, JSONResponse):
            return generation
        if generation is None:
            return _message(404, "TTS generation not found")
        return generation.to_payload()

    @app.get("/api/tts-generations/{generation_id}/audio")
    def get_tts_generation_audio(generation_id: str) -> Any:
        generation = guarded_by_id(
            "fetch TTS generation", generation_id, sample_store.get_tts_generation
        )
        if isinstance(generation, JSONResponse):
            return generation
        if generation is None:
            return _message(404, "TTS generation not found")
        return audio_response(generation.audio_data, "decode generated audio")

    @app.post("/api/tts-generations", status_code=201)
    def create_tts_generation(payload: Any = Body(default=None)) -> Any:
        try:
            body = TtsGenerationCreate.model_validate(payload)
        except ValidationError as exc:
            return _message(400, "Invalid TTS generation data", errors=validation_issues(exc))
        try:
            generation = generation_workflow.generate(body.to_input())
        except SpeechGenerationError as exc:
            return _message(500, "Failed to generate speech", error=exc.detail)
        except Exception as exc:
            logger.log_stage_failure("generation", type(exc).__name__)
            return _message(500, "Failed to generate speech", error=str(exc) or "Unknown error")
        return generation.to_payload()

    @app.delete("/api/tts-generations/{generation_id}")
    def delete_tts_generation(generation_id: str) -> Any:
        deleted = guarded_by_id(
            "delete TTS generation", generation_id, sample_store.delete_tts_generation
        )
        if isinstance(deleted, JSONResponse):
            return deleted
        if not deleted:
            return _message(404, "TTS generation not found")
        return {"message": "TTS generation deleted successfully"}

    # Dashboard

    @app.get("/api/stats")
    def get_stats() -> Any:
        result = guarded(
            "fetch stats",
            lambda: compute_progress(sample_store.list_recordings(), sample_store.list_phrases()),
        )
        if isinstance(result, JSONResponse):
            return result
        return result.to_payload()

    @app.get("/api/health")
    def health() -> Any:
        return {
            "status": "ok",
            "provider": generation_workflow.synthesizer.provider_id,
            "voiceProvisioned": generation_workflow.registry.get_voice_id() is not None,
        }

    return app
