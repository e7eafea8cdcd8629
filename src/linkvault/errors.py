"""Error taxonomy and FastAPI exception handlers.

Services raise AppError subclasses; the handlers registered here turn
them (and anything else that escapes a route) into ``{"error": message}``
JSON bodies so a single bad request never takes the worker down.
"""

from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()

INTERNAL_ERROR_MESSAGE = "An internal server error occurred."


class AppError(Exception):
    """Base for errors that map onto an HTTP status."""

    status_code = 500
    message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request."


class AuthError(AppError):
    status_code = 401
    message = "Not authorized."


class ForbiddenError(AppError):
    status_code = 403
    message = "You do not have permission to perform this action."


class NotFoundError(AppError):
    status_code = 404
    message = "Not found."


class ConflictError(AppError):
    status_code = 409
    message = "Resource already exists."


class InternalError(AppError):
    status_code = 500


def error_response(status_code: int, message: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code, content={"error": message}, headers=headers
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request.app_error",
        path=request.url.path,
        status=exc.status_code,
        error=exc.message,
    )
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Missing or malformed body fields are a 400, not FastAPI's 422."""
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return error_response(400, "Malformed request body.")

    fields = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        if loc and loc[-1] not in fields:
            fields.append(loc[-1])
    if fields:
        message = f"Missing or invalid fields: {', '.join(fields)}."
    else:
        message = "Malformed request body."
    return error_response(400, message)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    return error_response(exc.status_code, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.unhandled_error", path=request.url.path)
    return error_response(500, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
