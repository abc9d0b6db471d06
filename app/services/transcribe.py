"""whisper.cpp transcription helpers."""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Sequence

from app.services.errors import TranscriptionError
from app.services.process_runner import ProcessRunner

logger = logging.getLogger(__name__)

_TIMESTAMP_PATTERN = re.compile(
    r"\[\s*\d{1,2}:\d{2}(?::\d{2})?[.,]\d{3}\s*-->\s*\d{1,2}:\d{2}(?::\d{2})?[.,]\d{3}\s*\]"
)
# Engine diagnostics whisper.cpp prints alongside the transcript. Only lines
# without a timestamp are checked against these.
_LOG_LINE_PATTERN = re.compile(
    r"^\s*(?:(?:whisper|ggml)_[a-z0-9_]+|system_info|load_backend|output_[a-z]+)\s*:"
    r"|^\s*main: (?:processing|load)"
)
_PROGRESS_PATTERN = re.compile(r"^\s*(?:[a-z_]+:\s*)?progress\s*=\s*\d+%\s*$")
_NON_SPEECH_PATTERN = re.compile(
    r"\[\s*(BLANK_AUDIO|MUSIC|NOISE|SILENCE|INAUDIBLE|no speech)\s*\]"
    r"|\(\s*(silence|music|noise|inaudible|blank audio)\s*\)",
    re.IGNORECASE,
)
_WHITESPACE_PATTERN = re.compile(r"\s+")


def clean_transcription(raw_output: str) -> str:
    """Strip engine decoration from whisper output; ``""`` means no speech."""

    if not raw_output:
        return ""

    kept_lines: list[str] = []
    for line in raw_output.splitlines():
        if not _TIMESTAMP_PATTERN.search(line) and (
            _LOG_LINE_PATTERN.match(line) or _PROGRESS_PATTERN.match(line)
        ):
            continue
        line = _TIMESTAMP_PATTERN.sub(" ", line)
        line = _NON_SPEECH_PATTERN.sub(" ", line)
        kept_lines.append(line)

    return _WHITESPACE_PATTERN.sub(" ", " ".join(kept_lines)).strip()


class WhisperTranscriber:
    """Run the whisper.cpp CLI against normalized audio."""

    def __init__(
        self,
        runner: ProcessRunner,
        executable: str,
        model_path: str,
        extra_args: Sequence[str] = (),
    ) -> None:
        self._runner = runner
        self._executable = executable
        self._model_path = model_path
        self._extra_args = list(extra_args)

    async def transcribe(self, wav_path: Path) -> str:
        """Return the cleaned transcript for ``wav_path`` (possibly empty)."""

        args = ["-f", str(wav_path), "-m", self._model_path, *self._extra_args]
        try:
            result = await self._runner.run(self._executable, args)
        except subprocess.TimeoutExpired as exc:
            raise TranscriptionError(f"whisper timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise TranscriptionError(f"Could not start whisper: {exc}") from exc

        if not result.ok:
            stderr = result.stderr.strip()
            logger.error("whisper failed exit=%s stderr: %s", result.exit_code, stderr)
            raise TranscriptionError(
                f"whisper exited with code {result.exit_code}: {stderr or 'No stderr'}"
            )

        transcript = clean_transcription(result.stdout)
        logger.info("Transcription complete. Length: %s", len(transcript))
        return transcript


__all__ = ["WhisperTranscriber", "TranscriptionError", "clean_transcription"]
