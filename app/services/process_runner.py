"""Blocking subprocess execution behind a narrow, substitutable interface."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of one external process."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner(Protocol):
    async def run(self, executable: str, args: Sequence[str]) -> ProcessResult:
        """Run ``executable`` with ``args`` and wait for it to exit.

        Raises ``OSError`` when the process cannot be spawned and
        ``subprocess.TimeoutExpired`` when it outlives the runner timeout.
        """
        ...


class SubprocessRunner:
    """Run executables with ``subprocess.run`` on the Starlette thread pool."""

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    async def run(self, executable: str, args: Sequence[str]) -> ProcessResult:
        return await run_in_threadpool(self._run_sync, executable, list(args))

    def _run_sync(self, executable: str, args: list[str]) -> ProcessResult:
        command = [executable, *args]
        logger.debug("Running %s", " ".join(command))
        completed = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=self._timeout,
            check=False,
        )
        return ProcessResult(
            stdout=completed.stdout.decode("utf-8", errors="replace"),
            stderr=completed.stderr.decode("utf-8", errors="replace"),
            exit_code=completed.returncode,
        )


__all__ = ["ProcessResult", "ProcessRunner", "SubprocessRunner"]
