"""Error taxonomy and the FastAPI handlers that render it.

Services raise ApiError subclasses; the handlers registered in
``install_error_handlers`` turn them into JSON responses. Anything at or
above 500 is logged with its real message and replaced with a generic
one so infrastructure detail never reaches the client.
"""

from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = structlog.get_logger()

INTERNAL_MESSAGE = "Internal Server Error"


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.status_code} {self.message}"


class ValidationError(ApiError):
    """Malformed input. Carries per-field detail."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.errors = errors or {}


class AuthenticationError(ApiError):
    """Unknown/expired token or bad credentials."""

    status_code = 401


class AuthorizationError(ApiError):
    """Known identity, but not the owner of the record."""

    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class InternalError(ApiError):
    """Store unavailable, hashing failure, clock arithmetic failure."""

    status_code = 500


# ─── Handlers ────────────────────────────────────────────


def _render(exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("api.internal_error", status=exc.status_code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": INTERNAL_MESSAGE})

    content: dict[str, Any] = {"detail": exc.message}
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return _render(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Pydantic/FastAPI validation failures are a 400, keyed by field."""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        # Drop the "body"/"query"/"path" prefix from the location
        loc = [str(part) for part in err.get("loc", ())[1:]] or ["__root__"]
        errors.setdefault(".".join(loc), []).append(err.get("msg", "Invalid value"))
    return _render(ValidationError("Invalid request.", errors=errors))


async def database_error_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    if isinstance(exc, IntegrityError):
        logger.warning("db.integrity_error", path=request.url.path, error=str(exc.orig))
        return _render(ConflictError("Record conflicts with an existing one."))
    return _render(InternalError(f"Database error: {exc}"))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
