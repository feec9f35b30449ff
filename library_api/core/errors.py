from collections.abc import Mapping, Sequence
from typing import Any
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from library_api.core.logging import get_logger
from library_api.schemas.common import ErrorEnvelope


class LibraryError(Exception):
    """Base for errors a service raises on purpose."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message


class BadRequestError(LibraryError):
    status_code: int = HTTP_400_BAD_REQUEST


class NotFoundError(LibraryError):
    status_code: int = HTTP_404_NOT_FOUND


class ConflictError(LibraryError):
    status_code: int = HTTP_409_CONFLICT


class StorageError(LibraryError):
    """Unexpected failure from the persistence layer."""
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """Tell FK violations apart from unique ones (postgres and sqlite wording)."""
    error_message = str(exc.orig) if exc.orig is not None else str(exc)
    error_message = error_message.lower()
    return "foreign key" in error_message or "is not present in table" in error_message


def _envelope(status_code: int, message: str) -> JSONResponse:
    body = ErrorEnvelope(message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _first_validation_message(errors: Sequence[Mapping[str, Any]]) -> str:
    """Pick a human readable message from pydantic's error list."""
    if not errors:
        return "Invalid request"

    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Cannot parse JSON"

    message = str(first.get("msg", "Invalid request"))
    # field_validator errors come through as "Value error, <our message>"
    if message.startswith("Value error, "):
        return message[len("Value error, "):]

    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    if loc:
        return f"{'.'.join(loc)}: {message}"
    return message


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers rendering the response envelope."""

    @app.exception_handler(LibraryError)
    async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
        logger = get_logger(__name__, request)
        if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s", exc.message, exc_info=exc.__cause__)
        else:
            logger.warning("%s", exc.message, extra={"status_code": exc.status_code})
        return _envelope(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return _envelope(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        message = _first_validation_message(exc.errors())
        logger.info("Validation error: %s", message)
        return _envelope(HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("Database integrity error", extra={"error": str(exc.orig)})
        if is_foreign_key_violation(exc):
            return _envelope(HTTP_400_BAD_REQUEST, "Referenced resource not found")
        return _envelope(HTTP_409_CONFLICT, "Resource already exists")

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Database error", exc_info=exc)
        return _envelope(HTTP_500_INTERNAL_SERVER_ERROR, "Database error")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        return _envelope(HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")
