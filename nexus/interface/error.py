"""Interface layer error handling.

Maps invite engine errors to HTTP responses. The error kind is always
passed through so clients can tell e.g. an unknown code from a used one.
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from nexus.domain.error import ErrorKind, InviteEngineError

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.QUOTA_EXHAUSTED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_USED: status.HTTP_409_CONFLICT,
    ErrorKind.EXPIRED: status.HTTP_410_GONE,
    ErrorKind.CONTENTION: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

# Seconds a client should wait before retrying a retryable error
RETRY_AFTER_SECONDS = 1


class ErrorResponse(BaseModel):
    """Error body returned for engine failures."""

    kind: ErrorKind
    detail: str
    retryable: bool


async def invite_engine_error_handler(
    request: Request, exc: InviteEngineError
) -> JSONResponse:
    """Render an engine error with its kind."""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST)
    logfire.info(
        "Request failed",
        path=request.url.path,
        kind=exc.kind.value,
        status_code=status_code,
    )
    headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if exc.kind.retryable else None
    body = ErrorResponse(
        kind=exc.kind, detail=exc.message, retryable=exc.kind.retryable
    )
    return JSONResponse(
        status_code=status_code, content=body.model_dump(mode="json"), headers=headers
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register engine error handlers on the application."""
    app.add_exception_handler(
        InviteEngineError,
        invite_engine_error_handler,  # type: ignore[arg-type]
    )
