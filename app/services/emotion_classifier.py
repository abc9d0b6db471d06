"""Hugging Face inference client for sentence-level emotion scoring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from app.services.errors import ClassificationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmotionScore:
    label: str
    score: float


class EmotionClassifier(Protocol):
    async def classify(self, sentence: str) -> list[EmotionScore]:
        """Score one sentence; raise ``ClassificationError`` on failure."""
        ...


def parse_classification_payload(payload: Any) -> list[EmotionScore]:
    """Accept both flat and nested ``[{label, score}]`` inference responses."""

    if isinstance(payload, dict) and "error" in payload:
        raise ClassificationError(f"Inference API error: {payload['error']}")
    if not isinstance(payload, list):
        raise ClassificationError("Unexpected classification response shape")

    items = payload[0] if payload and isinstance(payload[0], list) else payload
    scores: list[EmotionScore] = []
    for item in items:
        if not isinstance(item, dict):
            raise ClassificationError("Unexpected classification item")
        try:
            scores.append(EmotionScore(label=str(item["label"]), score=float(item["score"])))
        except (KeyError, TypeError, ValueError) as exc:
            raise ClassificationError(f"Malformed classification item: {item!r}") from exc
    return scores


class HuggingFaceEmotionClassifier:
    """Call the hosted text-classification endpoint one sentence at a time."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        access_token: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._endpoint = endpoint
        self._timeout = timeout
        self._headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}

    async def classify(self, sentence: str) -> list[EmotionScore]:
        try:
            response = await self._client.post(
                self._endpoint,
                json={"inputs": sentence},
                headers=self._headers,
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise ClassificationError(
                f"Inference API returned {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise ClassificationError(f"Unable to reach inference API: {exc}") from exc
        except ValueError as exc:
            raise ClassificationError(f"Invalid JSON from inference API: {exc}") from exc

        return parse_classification_payload(payload)


__all__ = [
    "EmotionClassifier",
    "EmotionScore",
    "HuggingFaceEmotionClassifier",
    "ClassificationError",
    "parse_classification_payload",
]
