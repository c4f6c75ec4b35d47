"""Logging setup and the per-request access log.

Each request gets an id (taken from an incoming X-Request-ID header or freshly
generated) that is echoed back on the response and appears in its log line.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger("motion_control.request")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


class RequestLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, quiet_prefixes: tuple = ()):
        super().__init__(app)
        self._quiet_prefixes = quiet_prefixes

    def _level_for(self, path: str, status_code: int) -> int:
        if status_code >= 500:
            return logging.ERROR
        # Served upload bytes are fetched by the provider; keep them out of INFO
        if path.startswith(self._quiet_prefixes):
            return logging.DEBUG
        return logging.INFO

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "rid=%s client=%s %s %s -> UNHANDLED after %.2fms",
                request_id, client, request.method, path,
                (time.perf_counter() - start) * 1000.0,
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.log(
            self._level_for(path, response.status_code),
            "rid=%s client=%s %s %s -> %s in %.2fms",
            request_id, client, request.method, path, response.status_code,
            (time.perf_counter() - start) * 1000.0,
        )
        return response


def register_request_logging(app: FastAPI, quiet_prefixes: tuple = ()):
    app.add_middleware(RequestLogMiddleware, quiet_prefixes=quiet_prefixes)
