"""FFmpeg format normalization for answer recordings."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from app.services.errors import TranscodeError
from app.services.process_runner import ProcessRunner

logger = logging.getLogger(__name__)


class FormatNormalizer:
    """Transcode recordings to the PCM layout whisper.cpp expects."""

    def __init__(
        self,
        runner: ProcessRunner,
        ffmpeg_path: str = "ffmpeg",
        sample_rate: int = 16000,
        channels: int = 1,
        codec: str = "pcm_s16le",
    ) -> None:
        self._runner = runner
        self._ffmpeg_path = ffmpeg_path
        self._sample_rate = sample_rate
        self._channels = channels
        self._codec = codec

    def build_args(self, source: Path, target: Path) -> list[str]:
        return [
            "-y",  # Overwrite output if exists
            "-i", str(source),
            "-ar", str(self._sample_rate),
            "-ac", str(self._channels),
            "-acodec", self._codec,
            str(target),
        ]

    async def normalize(self, source: Path, target: Path) -> Path:
        """Convert ``source`` into ``target`` and return the output path."""

        try:
            result = await self._runner.run(self._ffmpeg_path, self.build_args(source, target))
        except subprocess.TimeoutExpired as exc:
            raise TranscodeError(f"ffmpeg timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise TranscodeError(f"Could not start ffmpeg: {exc}") from exc

        if not result.ok:
            stderr = result.stderr.strip()
            logger.error("ffmpeg failed exit=%s stderr: %s", result.exit_code, stderr)
            raise TranscodeError(
                f"ffmpeg exited with code {result.exit_code}: {stderr or 'No stderr'}",
                stderr=stderr,
            )
        return target


__all__ = ["FormatNormalizer", "TranscodeError"]
