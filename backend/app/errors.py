# api error taxonomy and exception handlers
# every error response is {"kind", "message", "errors"?, "error"?}

import logging
from enum import Enum
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# location prefixes fastapi puts in front of the field path
_LOC_SOURCES = {"body", "query", "path", "header"}


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


# duplicate email keeps the 400 the web client already handles
STATUS_CODES = {
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class FieldError(BaseModel):
    path: str
    message: str


class ErrorResponse(BaseModel):
    kind: ErrorKind
    message: str
    errors: Optional[list[FieldError]] = None
    error: Optional[str] = None


class ApiError(Exception):
    """tagged error raised by controllers and mapped to an http response"""

    def __init__(self, kind: ErrorKind, message: str, field_errors: Optional[list[FieldError]] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field_errors = field_errors

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    @classmethod
    def validation(cls, path: str, message: str) -> "ApiError":
        return cls(ErrorKind.VALIDATION_ERROR, "Validation error", [FieldError(path=path, message=message)])

    @classmethod
    def unauthorized(cls, message: str = "Authentication required") -> "ApiError":
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def not_found(cls, message: str) -> "ApiError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> "ApiError":
        return cls(ErrorKind.CONFLICT, message)


def _error_json(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def _field_path(loc) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOC_SOURCES:
        parts = parts[1:]
    return ".".join(str(p) for p in parts)


def validation_field_errors(exc: RequestValidationError) -> list[FieldError]:
    """flatten pydantic error details into {path, message} pairs"""
    return [
        FieldError(path=_field_path(err.get("loc", ())), message=err.get("msg", "Invalid value"))
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI, include_detail: bool) -> None:
    """install handlers so every failure uses the shared error envelope"""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return _error_json(
            exc.status_code,
            ErrorResponse(kind=exc.kind, message=exc.message, errors=exc.field_errors),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_json(
            status.HTTP_400_BAD_REQUEST,
            ErrorResponse(
                kind=ErrorKind.VALIDATION_ERROR,
                message="Validation error",
                errors=validation_field_errors(exc),
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        kind = {
            status.HTTP_401_UNAUTHORIZED: ErrorKind.UNAUTHORIZED,
            status.HTTP_404_NOT_FOUND: ErrorKind.NOT_FOUND,
        }.get(exc.status_code, ErrorKind.VALIDATION_ERROR if exc.status_code < 500 else ErrorKind.INTERNAL)
        return _error_json(exc.status_code, ErrorResponse(kind=kind, message=str(exc.detail)))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(
                kind=ErrorKind.INTERNAL,
                message="Internal server error",
                error=str(exc) if include_detail else None,
            ),
        )
