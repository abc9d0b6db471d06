"""Textual emotion stage (stage 4, ``classify``) of the answer pipeline.

Each sentence of the transcript is scored by the remote classifier; scores
are summed per label across sentences, normalized into a distribution, and
the top label becomes the dominant emotion.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Awaitable, Callable, Final, Mapping

from app.services.emotion_classifier import EmotionClassifier
from app.services.errors import ClassificationError
from app.services.retry import RetryPolicy, retry_async
from app.telemetry import increment_classification_failure

from .types import NEUTRAL_EMOTION, EmotionAnalysis, EmotionScoreDistribution

logger = logging.getLogger("app.services.answer_pipeline")

EMOTION_LABEL_MAP: Final[Mapping[str, str]] = {
    "joy": "Confident",
    "love": "Confident",
    "surprise": "Engaged",
    "sadness": "Hesitant",
    "fear": "Cautious",
    "anger": "Assertive",
}

_SCORE_PRECISION = 4
_SENTENCE_PATTERN = re.compile(r"[^.!?]*[.!?]+|[^.!?]+")


def map_emotion_label(label: str) -> str:
    """Translate a classifier label into interview language; unknown labels pass through."""

    return EMOTION_LABEL_MAP.get(label, label)


def split_sentences(text: str) -> list[str]:
    """Split on runs of terminal punctuation; ``"".join`` of the result is ``text``."""

    if not text:
        return []
    return _SENTENCE_PATTERN.findall(text)


def _rank(scores: Mapping[str, float]) -> list[tuple[str, float]]:
    return sorted(scores.items(), key=lambda item: (-item[1], item[0]))


def normalize_scores(accumulated: Mapping[str, float]) -> EmotionAnalysis:
    """Turn summed label scores into a distribution and pick the dominant label."""

    if not accumulated:
        return EmotionAnalysis(dominant_emotion=NEUTRAL_EMOTION, scores={})

    dominant_label = _rank(accumulated)[0][0]
    total = sum(accumulated.values())
    if total <= 0:
        # Nothing to normalize against; scores stay as accumulated.
        return EmotionAnalysis(dominant_emotion=dominant_label, scores=dict(accumulated))

    normalized: EmotionScoreDistribution = {
        label: round(score / total, _SCORE_PRECISION)
        for label, score in accumulated.items()
    }
    # Rounding residue goes to the dominant label so the map sums to 1.0.
    residual = round(1.0 - sum(normalized.values()), _SCORE_PRECISION)
    if residual:
        normalized[dominant_label] = round(
            normalized[dominant_label] + residual, _SCORE_PRECISION
        )
    return EmotionAnalysis(dominant_emotion=dominant_label, scores=normalized)


class EmotionAggregator:
    """Classify a transcript sentence by sentence and aggregate the result."""

    def __init__(
        self,
        classifier: EmotionClassifier,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._classifier = classifier
        self._retry_policy = retry_policy or RetryPolicy(max_attempts=3, delay=0.5)
        self._sleep = sleep

    async def aggregate(self, text: str) -> EmotionAnalysis:
        accumulated: dict[str, float] = {}

        for sentence in split_sentences(text):
            trimmed = sentence.strip()
            if not trimmed:
                continue

            try:
                results = await retry_async(
                    lambda: self._classifier.classify(trimmed),
                    self._retry_policy,
                    retry_on=(ClassificationError,),
                    sleep=self._sleep,
                )
            except ClassificationError as exc:
                logger.warning(
                    "Emotion classification failed for sentence %r after %s attempts: %s",
                    trimmed,
                    self._retry_policy.max_attempts,
                    exc,
                )
                increment_classification_failure()
                continue

            for result in results:
                accumulated[result.label] = accumulated.get(result.label, 0.0) + result.score

        analysis = normalize_scores(accumulated)
        logger.info(
            "Textual emotion dominant=%s scores=%s",
            analysis.dominant_emotion,
            analysis.scores,
        )
        return analysis


__all__ = [
    "EMOTION_LABEL_MAP",
    "EmotionAggregator",
    "map_emotion_label",
    "normalize_scores",
    "split_sentences",
]
