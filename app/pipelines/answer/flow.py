"""Orchestration of the answer-processing pipeline.

One submission moves through the stages strictly in order:

1. ``materialize`` – write the upload to the uploads directory.
2. ``normalize`` – ffmpeg to mono 16 kHz signed 16-bit PCM.
3. ``transcribe`` – whisper.cpp, cleaned; empty means "no speech".
4. ``classify`` – sentence-level emotion aggregation.
5. ``synthesize`` – prompt + Bedrock call + evaluation contract.

Both temporary audio files are removed on every exit path once the upload
has been materialized.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator

from app.services.storage import AudioStorage
from app.services.transcode import FormatNormalizer
from app.services.transcribe import WhisperTranscriber
from app.telemetry import observe_stage, record_pipeline_outcome

from .emotion import EmotionAggregator
from .llm import EvaluationSynthesizer
from .prompts import build_evaluation_request
from .types import (
    AnswerSubmission,
    PipelineOutcome,
    PipelineState,
    TemporaryAudioArtifact,
)

logger = logging.getLogger("app.services.answer_pipeline")
transcript_logger = logging.getLogger("app.logs.transcript")


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the answer pipeline."""

    order: int
    name: str
    module: str
    summary: str


_STAGES: tuple[PipelineStage, ...] = (
    PipelineStage(1, "materialize", "app.services.storage", "Persist the uploaded recording under a unique name."),
    PipelineStage(2, "normalize", "app.services.transcode", "Transcode to mono 16 kHz pcm_s16le WAV with ffmpeg."),
    PipelineStage(3, "transcribe", "app.services.transcribe", "Run whisper.cpp and clean its output."),
    PipelineStage(4, "classify", "app.pipelines.answer.emotion", "Aggregate sentence emotion scores into a distribution."),
    PipelineStage(5, "synthesize", "app.pipelines.answer.llm", "Ask Bedrock for the evaluation and validate the JSON contract."),
)


class AnswerPipeline:
    """Run one answer through every stage and return its terminal outcome."""

    def __init__(
        self,
        storage: AudioStorage,
        normalizer: FormatNormalizer,
        transcriber: WhisperTranscriber,
        aggregator: EmotionAggregator,
        synthesizer: EvaluationSynthesizer,
    ) -> None:
        self._storage = storage
        self._normalizer = normalizer
        self._transcriber = transcriber
        self._aggregator = aggregator
        self._synthesizer = synthesizer

    @staticmethod
    def describe() -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return _STAGES

    async def process(self, submission: AnswerSubmission) -> PipelineOutcome:
        state = PipelineState.START
        artifact: TemporaryAudioArtifact | None = None

        try:
            with _timed("materialize"):
                source = await self._storage.materialize(
                    submission.audio_bytes,
                    submission.content_type,
                    submission.filename,
                )
            artifact = TemporaryAudioArtifact.for_source(source)
            state = _advance(state, PipelineState.MATERIALIZED)

            with _timed("normalize"):
                await self._normalizer.normalize(artifact.source, artifact.normalized)
            state = _advance(state, PipelineState.NORMALIZED)

            with _timed("transcribe"):
                transcript = await self._transcriber.transcribe(artifact.normalized)
            state = _advance(state, PipelineState.TRANSCRIBED)
            transcript_logger.info(
                "answer | question=%s | text=%s", submission.question_text, transcript
            )

            if not transcript:
                state = _advance(state, PipelineState.NO_SPEECH)
                record_pipeline_outcome(state.value)
                return PipelineOutcome(state=state, transcript="")

            with _timed("classify"):
                emotion = await self._aggregator.aggregate(transcript)
            state = _advance(state, PipelineState.CLASSIFIED)

            with _timed("synthesize"):
                request = build_evaluation_request(submission, transcript, emotion)
                report = await self._synthesizer.synthesize(request)
            state = _advance(state, PipelineState.SYNTHESIZED)

            state = _advance(state, PipelineState.DONE)
            record_pipeline_outcome(state.value)
            return PipelineOutcome(
                state=state,
                transcript=transcript,
                emotion=emotion,
                report=report,
            )
        except Exception:
            logger.exception("Answer pipeline failed after state=%s", state.value)
            record_pipeline_outcome(PipelineState.FAILED.value)
            raise
        finally:
            if artifact is not None:
                artifact.remove()


def _advance(current: PipelineState, target: PipelineState) -> PipelineState:
    logger.debug("Pipeline state %s -> %s", current.value, target.value)
    return target


@contextmanager
def _timed(stage: str) -> Iterator[None]:
    start_time = time.perf_counter()
    try:
        yield
    finally:
        observe_stage(stage, time.perf_counter() - start_time)


__all__ = ["AnswerPipeline", "PipelineStage"]
