"""Hugging Face emotion classifier client and pipeline wiring."""

from __future__ import annotations

import json

import httpx
import pytest

from app.config.dependencies import build_answer_pipeline
from app.config.settings import Settings
from app.pipelines.answer import AnswerPipeline, EmotionAggregator
from app.services import (
    ClassificationError,
    EmotionScore,
    HuggingFaceEmotionClassifier,
    RetryPolicy,
    parse_classification_payload,
)

from conftest import no_sleep

ENDPOINT = "https://inference.test/models/emotion"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_parse_flat_payload():
    scores = parse_classification_payload([{"label": "joy", "score": 0.8}, {"label": "fear", "score": "0.2"}])

    assert scores == [EmotionScore("joy", 0.8), EmotionScore("fear", 0.2)]


def test_parse_nested_payload():
    scores = parse_classification_payload([[{"label": "sadness", "score": 0.6}, {"label": "love", "score": 0.4}]])

    assert [score.label for score in scores] == ["sadness", "love"]


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"error": "Model is currently loading"}, "Model is currently loading"),
        ({"labels": []}, "Unexpected classification response shape"),
        (["joy"], "Unexpected classification item"),
        ([{"label": "joy"}], "Malformed classification item"),
        ([{"label": "joy", "score": "high"}], "Malformed classification item"),
    ],
)
def test_parse_rejects_bad_payloads(payload, message):
    with pytest.raises(ClassificationError, match=message):
        parse_classification_payload(payload)


async def test_classify_posts_sentence_with_bearer_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[[{"label": "joy", "score": 0.9}, {"label": "anger", "score": 0.1}]])

    async with _client(handler) as client:
        classifier = HuggingFaceEmotionClassifier(client, ENDPOINT, access_token="hf_secret")
        scores = await classifier.classify("I shipped it on time.")

    assert scores[0] == EmotionScore("joy", 0.9)
    assert str(seen[0].url) == ENDPOINT
    assert seen[0].headers["authorization"] == "Bearer hf_secret"
    assert json.loads(seen[0].content) == {"inputs": "I shipped it on time."}


async def test_classify_without_token_sends_no_authorization():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"label": "joy", "score": 1.0}])

    async with _client(handler) as client:
        await HuggingFaceEmotionClassifier(client, ENDPOINT).classify("Hello.")

    assert "authorization" not in seen[0].headers


async def test_classify_maps_server_error():
    async with _client(lambda request: httpx.Response(503, text="busy")) as client:
        classifier = HuggingFaceEmotionClassifier(client, ENDPOINT)
        with pytest.raises(ClassificationError, match="503"):
            await classifier.classify("Hello.")


async def test_classify_maps_error_body():
    async with _client(lambda request: httpx.Response(200, json={"error": "Rate limit reached"})) as client:
        classifier = HuggingFaceEmotionClassifier(client, ENDPOINT)
        with pytest.raises(ClassificationError, match="Rate limit reached"):
            await classifier.classify("Hello.")


async def test_classify_maps_invalid_json():
    async with _client(lambda request: httpx.Response(200, text="<html>oops</html>")) as client:
        classifier = HuggingFaceEmotionClassifier(client, ENDPOINT)
        with pytest.raises(ClassificationError, match="Invalid JSON"):
            await classifier.classify("Hello.")


async def test_classify_maps_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        classifier = HuggingFaceEmotionClassifier(client, ENDPOINT)
        with pytest.raises(ClassificationError, match="Unable to reach"):
            await classifier.classify("Hello.")


async def test_unavailable_service_is_retried_then_skipped():
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(json.loads(request.content)["inputs"])
        return httpx.Response(503)

    async with _client(handler) as client:
        aggregator = EmotionAggregator(
            HuggingFaceEmotionClassifier(client, ENDPOINT),
            RetryPolicy(max_attempts=3, delay=0.5),
            sleep=no_sleep,
        )
        analysis = await aggregator.aggregate("First point. Second point.")

    assert calls == ["First point."] * 3 + ["Second point."] * 3
    assert analysis.dominant_emotion == "neutral"
    assert analysis.scores == {}


async def test_build_answer_pipeline_from_default_settings(tmp_path):
    settings = Settings(uploads_dir=str(tmp_path / "uploads"))
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[[{"label": "joy", "score": 1.0}]])

    async with _client(handler) as client:
        pipeline = build_answer_pipeline(settings, client)
        assert isinstance(pipeline, AnswerPipeline)
        analysis = await pipeline._aggregator.aggregate("It went well.")

    assert analysis.dominant_emotion == "joy"
    assert str(seen[0].url) == settings.emotion.endpoint
    assert pipeline._aggregator._retry_policy == RetryPolicy(max_attempts=3, delay=0.5)
    assert [stage.name for stage in pipeline.describe()] == [
        "materialize",
        "normalize",
        "transcribe",
        "classify",
        "synthesize",
    ]
