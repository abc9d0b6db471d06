import httpx

from app.pipelines.answer import AnswerPipeline, EmotionAggregator, EvaluationSynthesizer
from app.services import (
    AudioStorage,
    BedrockLlmClient,
    FormatNormalizer,
    HuggingFaceEmotionClassifier,
    RetryPolicy,
    SubprocessRunner,
    WhisperTranscriber,
)

from .settings import Settings


def build_answer_pipeline(settings: Settings, http_client: httpx.AsyncClient) -> AnswerPipeline:
    """Wire the pipeline collaborators once at process startup"""

    runner = SubprocessRunner(timeout=settings.process_timeout_seconds)
    emotion = settings.emotion
    access_token = emotion.access_token.get_secret_value() if emotion.access_token else None

    classifier = HuggingFaceEmotionClassifier(
        http_client,
        emotion.endpoint,
        access_token=access_token,
        timeout=emotion.timeout_seconds,
    )

    return AnswerPipeline(
        storage=AudioStorage(settings.uploads_dir),
        normalizer=FormatNormalizer(
            runner,
            ffmpeg_path=settings.ffmpeg.path,
            sample_rate=settings.ffmpeg.sample_rate,
            channels=settings.ffmpeg.channels,
            codec=settings.ffmpeg.codec,
        ),
        transcriber=WhisperTranscriber(
            runner,
            executable=settings.whisper.executable,
            model_path=settings.whisper.model_path,
            extra_args=settings.whisper.extra_args,
        ),
        aggregator=EmotionAggregator(
            classifier,
            RetryPolicy(
                max_attempts=emotion.max_attempts,
                delay=emotion.retry_delay_seconds,
            ),
        ),
        synthesizer=EvaluationSynthesizer(
            BedrockLlmClient(settings.bedrock, settings.aws),
            max_json_retries=settings.bedrock.max_json_retries,
        ),
    )
