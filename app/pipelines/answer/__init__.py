"""Answer-processing pipeline package.

Modules, in the order `POST /transcribe` reaches them:

- `ingestion` – validate the upload and decode telemetry form fields.
- `flow` – run the five stages (materialize, normalize, transcribe, classify,
  synthesize) and clean up the temporary audio.
- `emotion` – stage 4, aggregate sentence-level emotion scores.
- `prompts` – stage 5, assemble the evaluation prompts.
- `llm` – stage 5, call the evaluation model and validate its response.

The FastAPI controller imports from here so contributors can jump straight
to the relevant stage without wading through a single monolithic file.
"""

from .emotion import (
    EMOTION_LABEL_MAP,
    EmotionAggregator,
    map_emotion_label,
    normalize_scores,
    split_sentences,
)
from .flow import AnswerPipeline, PipelineStage
from .ingestion import InputError, build_submission, parse_telemetry, read_audio_bytes
from .llm import EvaluationSynthesizer
from .prompts import build_evaluation_request
from .types import (
    NEUTRAL_EMOTION,
    AnswerSubmission,
    EmotionAnalysis,
    EvaluationRequest,
    PipelineOutcome,
    PipelineState,
    TemporaryAudioArtifact,
)

__all__ = [
    "AnswerPipeline",
    "PipelineStage",
    "PipelineState",
    "PipelineOutcome",
    "AnswerSubmission",
    "TemporaryAudioArtifact",
    "EmotionAnalysis",
    "EvaluationRequest",
    "EmotionAggregator",
    "EvaluationSynthesizer",
    "EMOTION_LABEL_MAP",
    "NEUTRAL_EMOTION",
    "InputError",
    "build_submission",
    "build_evaluation_request",
    "map_emotion_label",
    "normalize_scores",
    "parse_telemetry",
    "read_audio_bytes",
    "split_sentences",
]
