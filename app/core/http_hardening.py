from __future__ import annotations

import logging
import re
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

# Probes hit these every few seconds; they are logged at DEBUG only.
QUIET_PATHS = frozenset({"/", "/health"})

access_log = logging.getLogger("app.http")

BASELINE_HEADERS = (
    ("X-Content-Type-Options", "nosniff"),
    ("X-Frame-Options", "DENY"),
    ("Referrer-Policy", "no-referrer"),
    # Dashboard figures move with every production event.
    ("Cache-Control", "no-store"),
)


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a caller's correlation id when it is safe to echo, else mint one."""
    candidate = (incoming or "").strip()
    if candidate and REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate
    return uuid4().hex


def stamp_response(response: Response, request_id: str) -> Response:
    for name, value in BASELINE_HEADERS:
        response.headers[name] = value
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _log_level(path: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.WARNING
    if path in QUIET_PATHS:
        return logging.DEBUG
    return logging.INFO


def install_http_hardening(app: FastAPI) -> None:
    @app.middleware("http")
    async def correlate_and_log(request: Request, call_next):
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        began = perf_counter()

        response = stamp_response(await call_next(request), request_id)

        elapsed_ms = (perf_counter() - began) * 1000.0
        access_log.log(
            _log_level(request.url.path, response.status_code),
            "%s %s -> %s in %.1fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
