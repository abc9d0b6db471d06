"""Evaluation stage (stage 5, ``synthesize``) of the answer pipeline."""

from __future__ import annotations

import logging

from app.services.errors import SchemaError
from app.services.llm_client import LlmClient
from app.services.response_contract import EvaluationReport

from .types import EvaluationRequest

logger = logging.getLogger("app.services.answer_pipeline")


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


class EvaluationSynthesizer:
    """Invoke the LLM and validate the evaluation contract."""

    def __init__(self, llm_client: LlmClient, max_json_retries: int = 1) -> None:
        self._llm_client = llm_client
        self._max_json_retries = max_json_retries

    async def synthesize(self, request: EvaluationRequest) -> EvaluationReport:
        for attempt in range(self._max_json_retries + 1):
            raw_response = await self._llm_client.invoke(
                system_prompt=request.system_prompt,
                user_prompt=request.user_prompt,
            )
            logger.info(
                "Raw evaluation response attempt=%s tone=%s: %s",
                attempt + 1,
                request.mapped_emotion,
                _truncate(raw_response),
            )

            try:
                return EvaluationReport.from_json(raw_response)
            except SchemaError as exc:
                logger.warning(
                    "LLM produced an invalid evaluation attempt=%s: %s",
                    attempt + 1,
                    exc,
                )
                if attempt >= self._max_json_retries:
                    raise

        # This point should be unreachable because the loop either returns or raises.
        raise SchemaError("Could not obtain a valid evaluation.")


__all__ = ["EvaluationSynthesizer"]
