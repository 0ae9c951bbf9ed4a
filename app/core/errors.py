"""Typed errors raised by the account core and their HTTP rendering.

Services raise these errors to express rule violations; the handlers
registered in `register_exception_handlers` turn them into `{"message": ...}`
responses so every failure has the same envelope.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for failures that carry an HTTP-style status and message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConflictError(AppError):
    """An entity with the same unique key already exists."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedError(AppError):
    """Credentials or one-time code were rejected."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    """Requested entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class NotificationError(AppError):
    """The notification gateway could not deliver a message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # input echoes the submitted body (passwords included); ctx may hold the raw ValueError
    errors = [{key: value for key, value in err.items() if key != "input"} for err in exc.errors()]
    details = jsonable_encoder(errors, custom_encoder={Exception: str})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation error", "details": details},
    )


def register_exception_handlers(application: FastAPI) -> None:
    """Attach the handlers that render every failure as `{"message": ...}`."""

    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)
