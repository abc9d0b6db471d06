"""Shared fakes for the answer pipeline tests."""

from __future__ import annotations

import json
from pathlib import Path
import sys
from typing import Callable, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.pipelines.answer import (  # noqa: E402
    AnswerPipeline,
    EmotionAggregator,
    EvaluationSynthesizer,
)
from app.services import (  # noqa: E402
    AudioStorage,
    ClassificationError,
    EmotionScore,
    FormatNormalizer,
    ProcessResult,
    RetryPolicy,
    WhisperTranscriber,
)

FFMPEG = "ffmpeg-test"
WHISPER = "whisper-test"
MODEL_PATH = "models/test.bin"

VALID_EVALUATION = {
    "evaluation": {
        "ratings": {
            "clarity": {"score": 4, "justification": "Clear and direct."},
            "relevance": {"score": 5, "justification": "Answers the question asked."},
            "completeness": {"score": 3, "justification": "Lacks a concrete result."},
        },
        "sentimentTone": "Confident wording matches a calm facial expression.",
        "answerStrength": "Concrete leadership example.",
        "howToMakeItBetter": ["Quantify the outcome.", "Mention the timeline."],
        "suggestedBetterAnswer": "I led a team of five engineers to ship a billing rewrite in three months.",
    },
    "holisticFeedback": {
        "insight": "Verbal and non-verbal signals align.",
        "strength": "Steady eye contact.",
        "improvement_tip": "Relax the shoulders.",
    },
}


class FakeProcessRunner:
    """Stand-in for ``SubprocessRunner`` that never spawns a process."""

    def __init__(self, whisper_stdout: str = "", *, write_outputs: bool = True) -> None:
        self.calls: list[tuple[str, list[str]]] = []
        self.results: dict[str, ProcessResult] = {}
        self.errors: dict[str, BaseException] = {}
        self.whisper_stdout = whisper_stdout
        self.write_outputs = write_outputs

    async def run(self, executable: str, args: Sequence[str]) -> ProcessResult:
        args = list(args)
        self.calls.append((executable, args))
        if executable in self.errors:
            raise self.errors[executable]
        if executable in self.results:
            return self.results[executable]
        if executable == FFMPEG:
            if self.write_outputs:
                Path(args[-1]).write_bytes(b"RIFF")
            return ProcessResult(stdout="", stderr="", exit_code=0)
        return ProcessResult(stdout=self.whisper_stdout, stderr="", exit_code=0)

    def executables(self) -> list[str]:
        return [executable for executable, _ in self.calls]


class FakeClassifier:
    """Scripted classifier: ``responses`` maps sentence -> scores or a failure."""

    def __init__(
        self,
        responses: dict[str, list[tuple[str, float]]] | None = None,
        failing: Sequence[str] = (),
        default: list[tuple[str, float]] | None = None,
    ) -> None:
        self.responses = responses or {}
        self.failing = set(failing)
        self.default = default if default is not None else [("joy", 0.9), ("sadness", 0.1)]
        self.calls: list[str] = []

    async def classify(self, sentence: str) -> list[EmotionScore]:
        self.calls.append(sentence)
        if sentence in self.failing:
            raise ClassificationError(f"boom: {sentence}")
        pairs = self.responses.get(sentence, self.default)
        return [EmotionScore(label=label, score=score) for label, score in pairs]


class FakeLlmClient:
    def __init__(self, responses: Sequence[str] | None = None) -> None:
        self.responses = list(responses or [json.dumps(VALID_EVALUATION)])
        self.calls: list[dict[str, str]] = []

    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str:
        self.calls.append({"system_prompt": system_prompt, "user_prompt": user_prompt})
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


async def no_sleep(_delay: float) -> None:
    return None


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def build_pipeline(uploads_dir: Path) -> Callable[..., AnswerPipeline]:
    def _build(
        runner: FakeProcessRunner,
        classifier: FakeClassifier | None = None,
        llm_client: FakeLlmClient | None = None,
        max_json_retries: int = 0,
    ) -> AnswerPipeline:
        return AnswerPipeline(
            storage=AudioStorage(uploads_dir),
            normalizer=FormatNormalizer(runner, ffmpeg_path=FFMPEG),
            transcriber=WhisperTranscriber(runner, executable=WHISPER, model_path=MODEL_PATH),
            aggregator=EmotionAggregator(
                classifier or FakeClassifier(),
                RetryPolicy(max_attempts=3, delay=0.5),
                sleep=no_sleep,
            ),
            synthesizer=EvaluationSynthesizer(
                llm_client or FakeLlmClient(),
                max_json_retries=max_json_retries,
            ),
        )

    return _build
