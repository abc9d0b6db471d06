"""Answer evaluation endpoint.

For a stage-by-stage map see `app.pipelines.answer.flow.AnswerPipeline`.
The POST `/transcribe` pipeline performs:

1. Validation of the upload and telemetry form fields.
2. Storage, ffmpeg normalization and whisper transcription of the recording.
3. Sentence-level textual emotion aggregation.
4. Bedrock evaluation of the answer against the structured JSON contract.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, File, Form, Request, UploadFile

from app.controllers.dependencies import AnswerPipelineDep
from app.middleware import annotate_pipeline
from app.pipelines.answer import AnswerPipeline, build_submission
from app.views import build_answer_response

router = APIRouter(tags=["answers"])

logger = logging.getLogger(__name__)

PIPELINE_STAGES = tuple(AnswerPipeline.describe())
"""Ordered pipeline metadata used for quick reference and debugging."""

_AUDIO_FILE_UPLOAD = File(None)
_QUESTION_FORM = Form("", alias="questionText")
_DOMAIN_FORM = Form("")
_EXPERIENCE_FORM = Form("")
_POSTURE_FORM = Form(None, alias="postureData")
_EMOTION_FORM = Form(None, alias="emotionData")


@router.post("/transcribe")
async def transcribe_answer(
    request: Request,
    pipeline: AnswerPipelineDep,
    audio: Optional[UploadFile] = _AUDIO_FILE_UPLOAD,
    question_text: str = _QUESTION_FORM,
    domain: str = _DOMAIN_FORM,
    experience: str = _EXPERIENCE_FORM,
    posture_data: Optional[str] = _POSTURE_FORM,
    emotion_data: Optional[str] = _EMOTION_FORM,
) -> dict[str, Any]:
    """Transcribe a recorded answer and return its coaching evaluation."""

    submission = await build_submission(
        audio,
        question_text=question_text,
        domain=domain,
        experience=experience,
        posture_data=posture_data,
        emotion_data=emotion_data,
    )
    logger.info(
        "Answer received role=%s level=%s bytes=%s content_type=%s",
        domain,
        experience,
        len(submission.audio_bytes),
        submission.content_type,
    )

    outcome = await pipeline.process(submission)
    annotate_pipeline(request, outcome.state.value)
    return build_answer_response(submission, outcome)


@router.get("/pipeline/stages")
async def list_pipeline_stages() -> list[dict[str, Any]]:
    """Describe the ordered stages of the answer pipeline."""

    return [
        {"order": stage.order, "name": stage.name, "module": stage.module, "summary": stage.summary}
        for stage in PIPELINE_STAGES
    ]
