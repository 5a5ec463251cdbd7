"""
Domain errors and their HTTP mapping.

Services raise these; the handlers registered by ``register_exception_handlers``
turn them into ``ErrorResponse`` bodies.
"""

from typing import Iterable, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from .logging import get_logger
from .schemas.common import ErrorResponse, FieldError

logger = get_logger("errors")


class NoteVerseError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


class ValidationError(NoteVerseError):
    """Malformed or missing input. Carries one entry per violated constraint."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"

    def __init__(self, errors: Iterable[FieldError], message: Optional[str] = None):
        self.errors: List[FieldError] = list(errors)
        super().__init__(message)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([FieldError(field=field, message=message)], message)

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]


class Unauthorized(NoteVerseError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"


class Forbidden(NoteVerseError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to access this note"


class NotFound(NoteVerseError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


def field_errors_from_pydantic(errors: Iterable[dict]) -> List[FieldError]:
    """Flatten pydantic error dicts into FieldError entries."""
    result = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        result.append(FieldError(field=".".join(loc) or "body", message=err.get("msg", "Invalid value")))
    return result


def _error_body(exc: NoteVerseError) -> dict:
    body = ErrorResponse(
        error=exc.code,
        message=exc.message,
        errors=getattr(exc, "errors", None),
    )
    return jsonable_encoder(body, exclude_none=True)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach JSON handlers for domain, request validation and store errors."""

    @app.exception_handler(NoteVerseError)
    async def noteverse_error_handler(request: Request, exc: NoteVerseError) -> JSONResponse:
        logger.info(
            "Request rejected",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": exc.code,
                "status_code": exc.status_code,
            },
        )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationError(field_errors_from_pydantic(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=_error_body(error))

    async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Database unavailable",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__,
            },
        )
        body = ErrorResponse(error="ServiceUnavailable", message="Service unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=jsonable_encoder(body, exclude_none=True),
        )

    app.add_exception_handler(OperationalError, store_unavailable_handler)
    app.add_exception_handler(InterfaceError, store_unavailable_handler)
