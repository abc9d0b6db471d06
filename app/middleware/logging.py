"""Request logging middleware for the answer service."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("app.middleware.structured")

COLOR_RESET = "\u001b[0m"
COLOR_GREEN = "\u001b[32m"
COLOR_CYAN = "\u001b[36m"
COLOR_YELLOW = "\u001b[33m"
COLOR_RED = "\u001b[31m"

# Set on ``request.state`` by the answer controller and the error handlers.
PIPELINE_STATE_ATTR = "pipeline_state"
FAILED_STAGE_ATTR = "failed_stage"


def annotate_pipeline(request: Request, state: str, stage: Optional[str] = None) -> None:
    """Attach the pipeline's terminal state (and failing stage) to the request log."""

    setattr(request.state, PIPELINE_STATE_ATTR, state)
    if stage is not None:
        setattr(request.state, FAILED_STAGE_ATTR, stage)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one line per request with upload size and pipeline outcome."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(self.format_line(request, 500, start_time))
            raise

        message = self.format_line(request, response.status_code, start_time)
        if response.status_code >= 500:
            logger.error(message)
        else:
            logger.info(message)
        return response

    @classmethod
    def format_line(cls, request: Request, status_code: int, start_time: float) -> str:
        fields: list[tuple[str, Any]] = [
            ("method", request.method),
            ("path", request.url.path),
            ("status", status_code),
            ("duration_ms", round((time.perf_counter() - start_time) * 1000, 2)),
        ]
        if request.method == "POST":
            fields.append(("upload_bytes", request.headers.get("content-length")))

        pipeline_state = getattr(request.state, PIPELINE_STATE_ATTR, None)
        if pipeline_state is not None:
            fields.append(("pipeline_state", pipeline_state))
            fields.append(("failed_stage", getattr(request.state, FAILED_STAGE_ATTR, None)))

        message = " ".join(
            f"{name}={value if value is not None else '-'}" for name, value in fields
        )
        return f"{cls._color_for(status_code)}{message}{COLOR_RESET}"

    @staticmethod
    def _color_for(status_code: int) -> str:
        if 200 <= status_code < 300:
            return COLOR_GREEN
        if 400 <= status_code < 500:
            return COLOR_YELLOW
        if status_code >= 500:
            return COLOR_RED
        return COLOR_CYAN
