from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class StorageFailure(Exception):
    """A storage call failed; carries the message shown to the caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidSearchFilter(ValueError):
    """Raised instead of dropping a filter when strict filtering is enabled."""


def failure_payload(message: str) -> dict:
    return {"success": False, "message": message}


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorageFailure)
    async def _storage_failure_handler(request: Request, exc: StorageFailure):
        return JSONResponse(status_code=500, content=failure_payload(exc.message))

    @app.exception_handler(InvalidSearchFilter)
    async def _invalid_filter_handler(request: Request, exc: InvalidSearchFilter):
        return JSONResponse(status_code=400, content=failure_payload(str(exc)))
