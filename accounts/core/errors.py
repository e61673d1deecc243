"""Error taxonomy shared by the store, the auth gate and route handlers.

Each error carries the HTTP status it maps to. ``message=None`` produces an
empty response body, which is what the auth gate uses for 401/403.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error."


class AppError(Exception):
    """Base class for errors that translate directly into an HTTP response."""

    status_code = 500

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message
        self.headers = headers


class ValidationError(AppError):
    """Client-correctable input problem."""

    status_code = 400


class Unauthenticated(AppError):
    """No usable credential was presented."""

    status_code = 401


class Forbidden(AppError):
    """Credential present but invalid, expired, or lacking the required role."""

    status_code = 403


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 409


class InternalError(AppError):
    """Store or unexpected failure; details stay in the server log."""

    status_code = 500


def app_error_handler(request: Request, exc: AppError) -> Response:
    if isinstance(exc, InternalError):
        logger.error(
            "Request failed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "reason": (exc.message or "")[:500],
            },
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": GENERIC_SERVER_ERROR},
        )
    if exc.message is None:
        return Response(status_code=exc.status_code, headers=exc.headers)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=exc.headers,
    )


def request_validation_handler(request: Request, exc: RequestValidationError) -> Response:
    # Submitted values (passwords included) are not echoed back.
    details = [
        {key: value for key, value in error.items() if key != "input"}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request.", "details": jsonable_encoder(details)},
    )


def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    logger.exception(
        "Unhandled error",
        extra={"method": request.method, "path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": GENERIC_SERVER_ERROR})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that turn AppError, request validation and stray exceptions into responses."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
