"""HTTP request/response logging middleware."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from dbprobe.core.constants import Routes
from dbprobe.core.logging import env_bool


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request.

    Successful requests under ``quiet_prefix`` are logged at DEBUG, since
    orchestrators poll the health probes every few seconds.
    """

    def __init__(self, app: ASGIApp, quiet_prefix: str | None = None) -> None:
        super().__init__(app)
        self.logger = logging.getLogger("dbprobe.request")
        self.quiet_prefix = quiet_prefix

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code: int | None = response.status_code if response else None
            path = request.url.path

            extra: dict[str, Any] = {
                "method": request.method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else None,
            }

            if status_code is None or status_code >= 500:
                log = self.logger.error
            elif self.quiet_prefix and path.startswith(self.quiet_prefix):
                log = self.logger.debug
            else:
                log = self.logger.info

            log(
                "%s %s -> %s (%.2fms)",
                request.method,
                path,
                status_code,
                duration_ms,
                extra=extra,
            )


def add_request_logging_middleware(app: FastAPI) -> None:
    """Attach request logging middleware (enabled by default)."""

    if not env_bool("LOG_REQUESTS", default=True):
        return
    app.add_middleware(RequestLoggingMiddleware, quiet_prefix=Routes.HEALTH.prefix)
