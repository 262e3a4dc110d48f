"""Exception handlers — render handled errors as ``{"error", "details"}`` bodies."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from study_assistant.application.schemas.common import ErrorResponse
from study_assistant.domain.exceptions import KeyValueStoreError, UpstreamServiceError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised by endpoints to return a specific error status and message."""

    def __init__(self, status_code: int, error: str, details: str | None = None):
        self.status_code = status_code
        self.error = error
        self.details = details
        super().__init__(f"{status_code}: {error}")


def error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.error(
        "%s %s -> %d %s: %s",
        request.method, request.url.path, exc.status_code, exc.error, exc.details,
    )
    return error_response(exc.status_code, exc.error, exc.details)


async def upstream_error_handler(request: Request, exc: UpstreamServiceError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "%s %s -> %d %s [%s]",
        request.method,
        request.url.path,
        exc.status_code,
        exc.error,
        exc.kind.value if exc.kind else "unknown",
    )
    return error_response(exc.status_code, exc.error, exc.details)


async def kv_store_error_handler(request: Request, exc: KeyValueStoreError) -> JSONResponse:
    logger.error("%s %s -> storage failure: %s", request.method, request.url.path, exc)
    return error_response(500, "Storage unavailable", exc.message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(UpstreamServiceError, upstream_error_handler)
    app.add_exception_handler(KeyValueStoreError, kv_store_error_handler)
