"""Pydantic models for validating the evaluation JSON produced by the LLM.

The synthesizer runs every model response through these schemas so that the
HTTP layer only ever sees a complete, range-checked evaluation.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.services.errors import SchemaError

MAX_IMPROVEMENT_TIPS = 5


class Rating(BaseModel):
    score: int = Field(ge=1, le=5)
    justification: str

    model_config = ConfigDict(frozen=True)


class Ratings(BaseModel):
    clarity: Rating
    relevance: Rating
    completeness: Rating

    model_config = ConfigDict(frozen=True)


class Evaluation(BaseModel):
    ratings: Ratings
    sentiment_tone: str = Field(alias="sentimentTone")
    answer_strength: str = Field(alias="answerStrength")
    how_to_make_it_better: list[str] = Field(
        default_factory=list,
        alias="howToMakeItBetter",
        max_length=MAX_IMPROVEMENT_TIPS,
    )
    suggested_better_answer: str = Field(alias="suggestedBetterAnswer")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("how_to_make_it_better", mode="before")
    @classmethod
    def limit_tips(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            return [tip for tip in value if str(tip).strip()][:MAX_IMPROVEMENT_TIPS]
        return value


class HolisticFeedback(BaseModel):
    insight: str
    strength: str
    improvement_tip: str

    model_config = ConfigDict(frozen=True)


class EvaluationReport(BaseModel):
    evaluation: Evaluation
    holistic_feedback: HolisticFeedback = Field(alias="holisticFeedback")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def from_json(cls, payload: str) -> "EvaluationReport":
        cleaned = _clean_json_payload(payload)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"Model response is not valid JSON: {exc}") from exc
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise SchemaError(
                f"Model response does not match the evaluation schema: {exc.error_count()} error(s)"
            ) from exc


def _clean_json_payload(payload: str) -> str:
    """Strip Markdown code fences and keep the outermost JSON object."""
    if not payload:
        return ""

    cleaned = payload.strip().replace("```json", "").replace("```", "").strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")

    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = [
    "EvaluationReport",
    "Evaluation",
    "HolisticFeedback",
    "Rating",
    "Ratings",
    "SchemaError",
    "MAX_IMPROVEMENT_TIPS",
]
