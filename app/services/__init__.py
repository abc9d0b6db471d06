"""Service layer helpers for external integrations."""

from .emotion_classifier import (
    EmotionClassifier,
    EmotionScore,
    HuggingFaceEmotionClassifier,
    parse_classification_payload,
)
from .errors import (
    ClassificationError,
    PipelineError,
    SchemaError,
    StorageError,
    SynthesisError,
    TranscodeError,
    TranscriptionError,
)
from .llm_client import BedrockLlmClient, LlmClient
from .process_runner import ProcessResult, ProcessRunner, SubprocessRunner
from .response_contract import EvaluationReport
from .retry import RetryPolicy, retry_async
from .storage import AudioStorage
from .transcode import FormatNormalizer
from .transcribe import WhisperTranscriber, clean_transcription

__all__ = [
    "AudioStorage",
    "FormatNormalizer",
    "WhisperTranscriber",
    "clean_transcription",
    "EmotionClassifier",
    "EmotionScore",
    "HuggingFaceEmotionClassifier",
    "parse_classification_payload",
    "BedrockLlmClient",
    "LlmClient",
    "EvaluationReport",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    "RetryPolicy",
    "retry_async",
    "PipelineError",
    "StorageError",
    "TranscodeError",
    "TranscriptionError",
    "ClassificationError",
    "SynthesisError",
    "SchemaError",
]
