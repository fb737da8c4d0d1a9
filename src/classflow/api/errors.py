"""Translate domain errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from classflow.core.errors import (
    DomainError,
    ErrorKind,
    InvalidCredentials,
    NotGroupOwner,
    PermissionDenied,
)

logger = logging.getLogger(__name__)

_KIND_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_MESSAGE = "An error occurred on the server. Please try again later."


def status_for(exc: DomainError) -> int:
    if isinstance(exc, (NotGroupOwner, PermissionDenied)):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, InvalidCredentials):
        return status.HTTP_401_UNAUTHORIZED
    return _KIND_STATUS[exc.kind]


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    code = status_for(exc)
    if exc.kind is ErrorKind.INTERNAL:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        detail = INTERNAL_MESSAGE
    else:
        detail = exc.message
    return JSONResponse(status_code=code, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
