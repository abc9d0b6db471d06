"""Integration-style tests for the /transcribe endpoint."""

from __future__ import annotations

import json
import logging

import pytest
from fastapi.testclient import TestClient

from app.controllers.dependencies import get_answer_pipeline
from app.main import app
from app.services import ProcessResult

from conftest import FFMPEG, FakeClassifier, FakeLlmClient, FakeProcessRunner

FORM = {
    "questionText": "Tell me about a time you led a team.",
    "domain": "Backend Engineer",
    "experience": "Senior",
}


@pytest.fixture
def runner() -> FakeProcessRunner:
    return FakeProcessRunner(whisper_stdout="[00:00:00.000 --> 00:00:02.000]  I led a team of five engineers.")


@pytest.fixture
def client(build_pipeline, runner):
    """Bypass startup wiring and external integrations for the test client."""

    pipeline = build_pipeline(
        runner,
        FakeClassifier(default=[("joy", 0.6), ("love", 0.3), ("anger", 0.1)]),
        FakeLlmClient(),
    )
    app.dependency_overrides[get_answer_pipeline] = lambda: pipeline

    yield TestClient(app)

    app.dependency_overrides.clear()


def _post(client: TestClient, data: dict | None = None, with_audio: bool = True):
    files = {"audio": ("answer.webm", b"\x1aE\xdf\xa3webm", "audio/webm")} if with_audio else None
    return client.post("/transcribe", data=data if data is not None else FORM, files=files)


def test_transcribe_returns_full_evaluation(client, uploads_dir):
    response = _post(client)

    assert response.status_code == 200
    payload = response.json()
    assert payload["transcription"] == "I led a team of five engineers."
    assert payload["question"] == FORM["questionText"]
    assert payload["dominantEmotion"] == "joy"
    assert payload["postureAnalysis"] == {"data": None}
    assert payload["emotionAnalysis"] == {"data": None}
    scores = payload["textualEmotionAnalysis"]["data"]
    assert sum(scores.values()) == pytest.approx(1.0, abs=1e-4)
    ratings = payload["evaluation"]["ratings"]
    for name in ("clarity", "relevance", "completeness"):
        assert isinstance(ratings[name]["score"], int)
        assert 1 <= ratings[name]["score"] <= 5
    assert len(payload["evaluation"]["howToMakeItBetter"]) <= 5
    assert set(payload["holisticFeedback"]) == {"insight", "strength", "improvement_tip"}
    assert not uploads_dir.exists() or list(uploads_dir.iterdir()) == []


def test_transcribe_passes_telemetry_through(client):
    posture = {"good": 12, "slouching": 3}
    facial = [{"emotion": "happy", "count": 40}]
    data = dict(FORM, postureData=json.dumps(posture), emotionData=json.dumps(facial))

    payload = _post(client, data).json()

    assert payload["postureAnalysis"] == {"data": posture}
    assert payload["emotionAnalysis"] == {"data": facial}


def test_transcribe_without_speech_skips_evaluation(client, runner):
    runner.whisper_stdout = "[00:00:00.000 --> 00:00:03.000]   [BLANK_AUDIO]"

    response = _post(client)

    assert response.status_code == 200
    assert response.json() == {"skipEvaluation": True, "message": "No speech detected."}


def test_transcribe_without_audio_is_rejected(client, runner):
    response = _post(client, with_audio=False)

    assert response.status_code == 400
    assert response.text == "No audio uploaded"
    assert runner.calls == []


def test_transcribe_rejects_malformed_telemetry(client, runner):
    response = _post(client, dict(FORM, postureData="{not json"))

    assert response.status_code == 400
    assert response.text.startswith("Invalid postureData")
    assert runner.calls == []


def test_transcribe_reports_processing_failure(client, runner, uploads_dir):
    runner.results[FFMPEG] = ProcessResult(stdout="", stderr="Invalid data found", exit_code=1)

    response = _post(client)

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith("Processing failed: ffmpeg exited with code 1")
    assert list(uploads_dir.iterdir()) == []


def test_pipeline_stages_endpoint(client):
    response = client.get("/pipeline/stages")

    assert response.status_code == 200
    assert [stage["order"] for stage in response.json()] == [1, 2, 3, 4, 5]


def test_health_and_metrics(client):
    assert client.get("/health").json()["status"] == "healthy"

    _post(client)
    metrics = client.get("/metrics")

    assert metrics.status_code == 200
    assert "answer_pipeline_runs_total" in metrics.text


@pytest.fixture
def request_log(caplog):
    middleware_logger = logging.getLogger("app.middleware.structured")
    caplog.set_level(logging.INFO, logger="app.middleware.structured")
    middleware_logger.addHandler(caplog.handler)
    yield caplog
    middleware_logger.removeHandler(caplog.handler)


def test_request_log_includes_upload_size_and_pipeline_state(client, request_log):
    response = _post(client)

    assert response.status_code == 200
    line = _last_request_line(request_log)
    assert "path=/transcribe" in line
    assert f"upload_bytes={response.request.headers['content-length']}" in line
    assert "pipeline_state=done" in line
    assert "failed_stage=-" in line


def test_request_log_names_failing_stage(client, runner, request_log):
    runner.results[FFMPEG] = ProcessResult(stdout="", stderr="Invalid data found", exit_code=1)

    _post(client)

    line = _last_request_line(request_log)
    assert "status=500" in line
    assert "pipeline_state=failed" in line
    assert "failed_stage=transcode" in line


def test_request_log_omits_pipeline_fields_for_plain_requests(client, request_log):
    client.get("/health")

    line = _last_request_line(request_log)
    assert "path=/health" in line
    assert "pipeline_state" not in line
    assert "upload_bytes" not in line


def _last_request_line(caplog) -> str:
    records = [record for record in caplog.records if record.name == "app.middleware.structured"]
    return records[-1].getMessage()
