"""Response schemas for the answer evaluation endpoint."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.pipelines.answer import AnswerSubmission, PipelineOutcome

NO_SPEECH_MESSAGE = "No speech detected."


class DataEnvelope(BaseModel):
    data: Optional[Any] = None


class NoSpeechResponse(BaseModel):
    skip_evaluation: bool = Field(default=True, alias="skipEvaluation")
    message: str = NO_SPEECH_MESSAGE

    model_config = ConfigDict(populate_by_name=True)


class AnswerEvaluationResponse(BaseModel):
    transcription: str
    posture_analysis: DataEnvelope = Field(alias="postureAnalysis")
    emotion_analysis: DataEnvelope = Field(alias="emotionAnalysis")
    dominant_emotion: str = Field(alias="dominantEmotion")
    textual_emotion_analysis: DataEnvelope = Field(alias="textualEmotionAnalysis")
    evaluation: Dict[str, Any]
    holistic_feedback: Dict[str, Any] = Field(alias="holisticFeedback")
    question: str

    model_config = ConfigDict(populate_by_name=True)


def build_answer_response(
    submission: AnswerSubmission,
    outcome: PipelineOutcome,
) -> Dict[str, Any]:
    """Render a pipeline outcome into the JSON body the client expects."""

    if not outcome.speech_detected:
        return NoSpeechResponse().model_dump(by_alias=True)

    report = outcome.report.model_dump(by_alias=True)
    response = AnswerEvaluationResponse(
        transcription=outcome.transcript,
        posture_analysis=DataEnvelope(data=submission.posture_data),
        emotion_analysis=DataEnvelope(data=submission.emotion_data),
        dominant_emotion=outcome.emotion.dominant_emotion,
        textual_emotion_analysis=DataEnvelope(data=dict(outcome.emotion.scores)),
        evaluation=report["evaluation"],
        holistic_feedback=report["holisticFeedback"],
        question=submission.question_text,
    )
    return response.model_dump(by_alias=True)
