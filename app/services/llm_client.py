"""Thin Bedrock client wrapper for evaluation LLM invocations."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Optional, Protocol

from fastapi.concurrency import run_in_threadpool

from app.config.settings import AwsConfig, BedrockConfig
from app.services.aws import create_boto3_client
from app.services.errors import SynthesisError

logger = logging.getLogger(__name__)


class LlmClient(Protocol):
    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str:
        ...


def _decode_bedrock_api_key(secret_value: Optional[str]) -> tuple[str, str] | None:
    """Decode the BEDROCK_API_KEY secret into access/secret key components."""

    if not secret_value:
        return None

    try:
        decoded_bytes = base64.b64decode(secret_value.strip())
    except (binascii.Error, ValueError):
        decoded_bytes = secret_value.encode("utf-8", "ignore")

    filtered = "".join(chr(b) for b in decoded_bytes if 31 < b < 127)
    if ":" not in filtered:
        return None
    access_key, secret_key = filtered.split(":", 1)
    return access_key, secret_key


class BedrockLlmClient:
    """Invoke Amazon Bedrock models with standard configuration."""

    def __init__(self, bedrock: BedrockConfig, aws: AwsConfig, client: Any | None = None) -> None:
        self._config = bedrock

        if client is not None:
            self._client = client
            return

        api_key_tuple = None
        if bedrock.api_key:
            api_key_tuple = _decode_bedrock_api_key(bedrock.api_key.get_secret_value())

        self._client = create_boto3_client(
            "bedrock-runtime",
            aws,
            region_name=bedrock.region,
            aws_access_key_id=api_key_tuple[0] if api_key_tuple else None,
            aws_secret_access_key=api_key_tuple[1] if api_key_tuple else None,
            read_timeout=bedrock.timeout_seconds,
        )

    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str:
        """Run a Bedrock ``converse`` call and return the aggregate text output."""

        inference_cfg = {
            "maxTokens": self._config.max_tokens,
            "temperature": self._config.temperature,
            "topP": self._config.top_p,
        }

        def _call() -> str:
            response = self._client.converse(
                modelId=self._config.model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            result = await run_in_threadpool(_call)
        except Exception as exc:  # pragma: no cover - external dependency
            raise SynthesisError(f"Generative model call failed: {exc}") from exc

        if not result:
            raise SynthesisError("Generative model returned an empty response.")
        return result


__all__ = ["BedrockLlmClient", "LlmClient", "SynthesisError"]
