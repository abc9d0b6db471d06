"""Prompt construction stage for the answer pipeline.

The first half of stage 5 (``synthesize``) combines transcript, interview
context, non-verbal telemetry and the mapped textual tone into the prompts
consumed by the evaluation LLM.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from app.services.response_contract import MAX_IMPROVEMENT_TIPS

from .emotion import map_emotion_label
from .types import AnswerSubmission, EmotionAnalysis, EvaluationRequest

logger = logging.getLogger("app.services.answer_pipeline")

SYSTEM_PROMPT = (
    "You are an elite AI interview coach. You evaluate one interview answer at a "
    "time using only the data you are given, and you always reply with a single "
    "valid JSON object and nothing else."
)

_USER_PROMPT_TEMPLATE = """Provide a structured, precise evaluation based ONLY on the data provided.

**INPUT DATA:**
- **Context:** Role: "{domain}", Level: "{experience}".
- **Question:** "{question}"
- **Transcript:** "{transcript}"
- **Posture Data:** {posture}
- **Facial Emotion Data:** {facial}
- **Textual Tone (Mapped):** The dominant tone of the words was "{tone}".

**YOUR TASK:**
Respond ONLY with a valid JSON object. Follow these rules precisely:
1. **Ratings & Justifications:** For each rating (clarity, relevance, completeness), provide a score (1-5 integer) AND a concise, one-sentence justification explaining *why* you gave that score.
2. **Consistent Tone Analysis:** In 'sentimentTone', use the mapped term "{tone}" and compare it to the facial emotion data. Highlight alignment or divergence and its impact.
3. **Answer Strength:** In 'answerStrength', name the strongest aspect of the answer's content.
4. **Improvement Tips:** In 'howToMakeItBetter', list actionable tips, as many as required but never more than {max_tips}.
5. **Better Answer:** In 'suggestedBetterAnswer', write an improved version of the answer.
6. **Holistic Feedback:** In 'holisticFeedback', synthesize transcript, tone and non-verbal cues, name the single most positive non-verbal behavior, and the single most impactful non-verbal tip.
7. **Strict Adherence:** Do not add any text, markdown, or explanations outside the JSON structure.

**JSON OUTPUT TEMPLATE:**
{{
  "evaluation": {{
    "ratings": {{
      "clarity": {{ "score": 1-5, "justification": "Why this score was given for clarity." }},
      "relevance": {{ "score": 1-5, "justification": "Why this score was given for relevance." }},
      "completeness": {{ "score": 1-5, "justification": "Why this score was given for completeness." }}
    }},
    "sentimentTone": "A 2-3 sentence analysis comparing the '{tone}' textual tone with facial data along with a tip to improve the verbal tone of the answer.",
    "answerStrength": "The strongest part of the answer's content.",
    "howToMakeItBetter": ["Actionable tip 1.", "Actionable tip 2."],
    "suggestedBetterAnswer": "An improved version of the answer."
  }},
  "holisticFeedback": {{
    "insight": "A 2-3 sentence synthesis of transcript, tone, and non-verbal cues, noting any conflicts.",
    "strength": "The single most positive non-verbal behavior observed.",
    "improvement_tip": "The single most impactful non-verbal tip."
  }}
}}
"""


def _as_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _truncate(value: str, max_length: int = 240) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def build_evaluation_request(
    submission: AnswerSubmission,
    transcript: str,
    emotion: EmotionAnalysis,
) -> EvaluationRequest:
    """Assemble prompts and metadata for the evaluation LLM invocation."""

    tone = map_emotion_label(emotion.dominant_emotion)
    user_prompt = _USER_PROMPT_TEMPLATE.format(
        domain=submission.domain,
        experience=submission.experience,
        question=submission.question_text,
        transcript=transcript,
        posture=_as_json(submission.posture_data),
        facial=_as_json(submission.emotion_data),
        tone=tone,
        max_tips=MAX_IMPROVEMENT_TIPS,
    )

    logger.info(
        "Evaluation prompt built role=%s level=%s tone=%s\nUSER> %s",
        submission.domain,
        submission.experience,
        tone,
        _truncate(user_prompt, 500),
    )

    return EvaluationRequest(
        mapped_emotion=tone,
        system_prompt=SYSTEM_PROMPT,
        user_prompt=user_prompt,
    )


__all__ = ["SYSTEM_PROMPT", "build_evaluation_request"]
