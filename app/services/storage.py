"""Local storage helpers for answer recordings."""

from __future__ import annotations

import logging
import mimetypes
import random
import time
from pathlib import Path
from typing import Final

from fastapi.concurrency import run_in_threadpool

from app.services.errors import StorageError

logger = logging.getLogger(__name__)

_DEFAULT_EXTENSION: Final[str] = "webm"
_AUDIO_EXTENSIONS: Final[dict[str, str]] = {
    "audio/webm": "webm",
    "video/webm": "webm",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/wave": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "m4a",
    "audio/x-m4a": "m4a",
    "audio/m4a": "m4a",
}


def resolve_extension(content_type: str | None, filename: str | None = None) -> str:
    """Pick a file extension from the upload's content hint."""

    if content_type:
        base_type = content_type.split(";", 1)[0].strip().lower()
        if base_type in _AUDIO_EXTENSIONS:
            return _AUDIO_EXTENSIONS[base_type]
        guessed = mimetypes.guess_extension(base_type)
        if guessed:
            return guessed.lstrip(".")

    if filename:
        suffix = Path(filename).suffix.lstrip(".").lower()
        if suffix:
            return suffix

    return _DEFAULT_EXTENSION


class AudioStorage:
    """Persist uploaded recordings under collision-resistant names."""

    def __init__(self, uploads_dir: str | Path) -> None:
        self._root = Path(uploads_dir).resolve()

    @property
    def root(self) -> Path:
        return self._root

    async def materialize(
        self,
        audio_bytes: bytes,
        content_type: str | None,
        filename: str | None = None,
    ) -> Path:
        """Write the recording to disk and return its absolute path."""

        extension = resolve_extension(content_type, filename)
        unique_id = f"{time.time_ns()}-{random.randint(0, 1_000_000_000)}"
        target = self._root / f"{unique_id}-answer.{extension}"
        await run_in_threadpool(self._write, target, audio_bytes)
        return target

    def _write(self, target: Path, audio_bytes: bytes) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(audio_bytes)
        except OSError as exc:
            self.discard(target)
            raise StorageError(f"Failed to store uploaded audio: {exc}") from exc

    @staticmethod
    def discard(path: Path) -> None:
        """Delete ``path`` if it exists; a missing file is not an error."""

        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove temporary file %s: %s", path, exc)


__all__ = ["AudioStorage", "StorageError", "resolve_extension"]
