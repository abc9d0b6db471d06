"""Error hierarchy shared by the answer-processing pipeline stages."""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Fatal failure of one pipeline stage; surfaced as a processing failure."""

    stage = "pipeline"


class StorageError(PipelineError):
    """Raised when the uploaded recording cannot be written to disk."""

    stage = "storage"


class TranscodeError(PipelineError):
    """Raised when ffmpeg cannot normalize the recording."""

    stage = "transcode"

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class TranscriptionError(PipelineError):
    """Raised when the speech-to-text engine fails."""

    stage = "transcription"


class SynthesisError(PipelineError):
    """Raised when the generative model invocation fails."""

    stage = "synthesis"


class SchemaError(PipelineError):
    """Raised when the generative model output is not a valid evaluation."""

    stage = "schema"


class ClassificationError(RuntimeError):
    """Raised when one sentence cannot be classified.

    Never fatal for a request: the emotion aggregator retries and then skips
    the sentence.
    """


__all__ = [
    "PipelineError",
    "StorageError",
    "TranscodeError",
    "TranscriptionError",
    "SynthesisError",
    "SchemaError",
    "ClassificationError",
]
