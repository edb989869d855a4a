"""
Exception handlers rendering every error as ``{"error": message}``.

Domain exceptions raised by services and repositories map to HTTP status
codes here, so routes only deal with the success path.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..database.exceptions import (
    ConflictError,
    DatabaseConstraintError,
    EntityNotFoundError,
    ValidationError,
)
from ..utils.security import AuthenticationError

logger = logging.getLogger(__name__)

DOMAIN_STATUS_CODES = {
    EntityNotFoundError: 404,
    ValidationError: 400,
    ConflictError: 400,
    DatabaseConstraintError: 400,
    AuthenticationError: 401,
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def describe_validation_error(exc: RequestValidationError) -> str:
    """First validation problem as 'field: message'."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = first.get("msg", "Invalid value")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = describe_validation_error(exc)
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return error_response(400, message)


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    for exc_type, status_code in DOMAIN_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return error_response(status_code, str(exc))
    return await global_exception_handler(request, exc)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log with traceback, answer with a generic message."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    for exc_type in DOMAIN_STATUS_CODES:
        app.add_exception_handler(exc_type, domain_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
