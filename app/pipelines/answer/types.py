"""Typed containers shared across the answer-processing pipeline.

These dataclasses live in their own module so the other stages
(`ingestion`, `emotion`, `prompts`, `llm`, `flow`) can import them without
creating circular dependencies.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from app.services.response_contract import EvaluationReport
from app.services.storage import AudioStorage

NEUTRAL_EMOTION = "neutral"

EmotionScoreDistribution = Dict[str, float]


class PipelineState(str, enum.Enum):
    START = "start"
    MATERIALIZED = "materialized"
    NORMALIZED = "normalized"
    TRANSCRIBED = "transcribed"
    NO_SPEECH = "no_speech"
    CLASSIFIED = "classified"
    SYNTHESIZED = "synthesized"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class AnswerSubmission:
    """One recorded answer plus the form fields sent alongside it."""

    audio_bytes: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None
    question_text: str = ""
    domain: str = ""
    experience: str = ""
    posture_data: Any = None
    emotion_data: Any = None


@dataclass(frozen=True)
class TemporaryAudioArtifact:
    """The stored upload and its normalized WAV sibling."""

    source: Path
    normalized: Path

    @classmethod
    def for_source(cls, source: Path) -> "TemporaryAudioArtifact":
        return cls(source=source, normalized=source.with_name(f"{source.stem}-16k.wav"))

    def remove(self) -> None:
        """Delete both files; safe to call repeatedly."""
        AudioStorage.discard(self.source)
        AudioStorage.discard(self.normalized)


@dataclass(frozen=True)
class EmotionAnalysis:
    dominant_emotion: str = NEUTRAL_EMOTION
    scores: EmotionScoreDistribution = field(default_factory=dict)


@dataclass(frozen=True)
class EvaluationRequest:
    """Prompts handed to the evaluation LLM."""

    mapped_emotion: str
    system_prompt: str
    user_prompt: str


@dataclass(frozen=True)
class PipelineOutcome:
    """Terminal result of one pipeline run."""

    state: PipelineState
    transcript: str
    emotion: Optional[EmotionAnalysis] = None
    report: Optional[EvaluationReport] = None

    @property
    def speech_detected(self) -> bool:
        return self.state is not PipelineState.NO_SPEECH


__all__ = [
    "NEUTRAL_EMOTION",
    "EmotionScoreDistribution",
    "PipelineState",
    "AnswerSubmission",
    "TemporaryAudioArtifact",
    "EmotionAnalysis",
    "EvaluationRequest",
    "PipelineOutcome",
]
