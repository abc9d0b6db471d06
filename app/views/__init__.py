"""Pydantic schemas used as views in the MVC architecture."""

from .answers import (
    NO_SPEECH_MESSAGE,
    AnswerEvaluationResponse,
    DataEnvelope,
    NoSpeechResponse,
    build_answer_response,
)

__all__ = [
    "NO_SPEECH_MESSAGE",
    "AnswerEvaluationResponse",
    "DataEnvelope",
    "NoSpeechResponse",
    "build_answer_response",
]
