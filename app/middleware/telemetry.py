"""Telemetry middleware for request instrumentation."""

from __future__ import annotations

import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.telemetry import observe_request, observe_upload_size, track_in_flight


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request, in-flight and upload-size metrics for Prometheus."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        method = request.method
        status_code = 500

        with track_in_flight(method):
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                # The route is only resolved once the router has matched.
                route = self._resolve_route(request)
                observe_request(method, route, status_code, time.perf_counter() - start_time)

        content_length = self._content_length(request)
        if method == "POST" and content_length is not None:
            observe_upload_size(route, content_length)
        return response

    @staticmethod
    def _content_length(request: Request) -> int | None:
        raw_value = request.headers.get("content-length")
        if raw_value is None:
            return None
        try:
            return int(raw_value)
        except ValueError:
            return None

    @staticmethod
    def _resolve_route(request: Request) -> str:
        """Return best-effort route pattern for metrics labels."""

        scope_route: Any = request.scope.get("route")
        if scope_route is not None:
            path = getattr(scope_route, "path", None)
            if path:
                return path

        return request.url.path
