import asyncio
import os
import sys
from pathlib import Path

# Add project root to path so we can import app
sys.path.append(os.getcwd())

from app.config.settings import settings
from app.pipelines.answer import TemporaryAudioArtifact
from app.services import (
    AudioStorage,
    FormatNormalizer,
    PipelineError,
    SubprocessRunner,
    WhisperTranscriber,
)


async def main():
    file_path = "answer.webm"
    if len(sys.argv) > 1:
        file_path = sys.argv[1]

    if not os.path.exists(file_path):
        print(f"File '{file_path}' not found. Please provide a path to an audio file.")
        print("Usage: python scripts/test_transcribe.py [path/to/answer.webm]")
        return

    print(f"Reading {file_path}...")
    audio_bytes = Path(file_path).read_bytes()

    runner = SubprocessRunner(timeout=settings.process_timeout_seconds)
    storage = AudioStorage(settings.uploads_dir)
    normalizer = FormatNormalizer(runner, ffmpeg_path=settings.ffmpeg.path)
    transcriber = WhisperTranscriber(
        runner,
        executable=settings.whisper.executable,
        model_path=settings.whisper.model_path,
        extra_args=settings.whisper.extra_args,
    )

    print(f"Transcribing {len(audio_bytes)} bytes with {settings.whisper.executable}...")
    artifact = None
    try:
        source = await storage.materialize(audio_bytes, None, filename=file_path)
        artifact = TemporaryAudioArtifact.for_source(source)
        await normalizer.normalize(artifact.source, artifact.normalized)
        transcript = await transcriber.transcribe(artifact.normalized)

        print("\n--- Transcript Result ---")
        print(transcript or "<no speech detected>")
        print("-------------------------")

    except PipelineError as e:
        print(f"\n{e.stage} error: {e}")
    finally:
        if artifact is not None:
            artifact.remove()

if __name__ == "__main__":
    asyncio.run(main())
