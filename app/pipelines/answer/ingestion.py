"""Request ingestion helpers; they run in the controller before ``materialize``."""

from __future__ import annotations

import json
from typing import Any

from fastapi import UploadFile

from .types import AnswerSubmission


class InputError(ValueError):
    """Raised when the request is rejected before any pipeline stage runs."""


async def read_audio_bytes(audio_file: UploadFile | None) -> bytes:
    """Load the upload fully into memory, rejecting missing or empty payloads."""

    if audio_file is None:
        raise InputError("No audio uploaded")

    audio_bytes = await audio_file.read()
    await audio_file.close()

    if not audio_bytes:
        raise InputError("No audio uploaded")
    return audio_bytes


def parse_telemetry(field_name: str, raw_value: str | None) -> Any:
    """Decode an optional JSON-encoded telemetry field; blank means absent."""

    if raw_value is None or not raw_value.strip():
        return None
    try:
        return json.loads(raw_value)
    except json.JSONDecodeError as exc:
        raise InputError(f"Invalid {field_name}: {exc.msg}") from exc


async def build_submission(
    audio_file: UploadFile | None,
    *,
    question_text: str = "",
    domain: str = "",
    experience: str = "",
    posture_data: str | None = None,
    emotion_data: str | None = None,
) -> AnswerSubmission:
    audio_bytes = await read_audio_bytes(audio_file)
    return AnswerSubmission(
        audio_bytes=audio_bytes,
        content_type=audio_file.content_type,
        filename=audio_file.filename,
        question_text=question_text,
        domain=domain,
        experience=experience,
        posture_data=parse_telemetry("postureData", posture_data),
        emotion_data=parse_telemetry("emotionData", emotion_data),
    )


__all__ = ["InputError", "build_submission", "parse_telemetry", "read_audio_bytes"]
