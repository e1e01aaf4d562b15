"""RFC 7807 problem responses for the access-control API.

Every error leaves the service as ``application/problem+json`` with a
``type`` URI under ``{api_docs_base_url}/errors/``. Domain ``details``
are merged into the body next to the standard members.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from remiwire.config import settings
from remiwire.core.errors.exceptions import (
    AppException,
    ForbiddenError,
    UnauthorizedError,
)


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()

PROBLEM_MEDIA_TYPE = "application/problem+json"
UNPROCESSABLE = 422


class FieldError(BaseModel):
    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """Problem body. Extra members carry the error's details."""

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def _problem(
    request: Request,
    code: str,
    status_code: int,
    detail: str,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{code}",
        title=code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)

    for key, value in (extra or {}).items():
        body.setdefault(key, value)

    return JSONResponse(
        status_code=status_code,
        content=body,
        headers=headers,
        media_type=PROBLEM_MEDIA_TYPE,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render a domain error. Denials (401/403) are logged by code only."""
    if isinstance(exc, UnauthorizedError | ForbiddenError):
        logger.info("access_denied", error_code=exc.error_code, path=request.url.path)
    else:
        logger.warning(
            "app_exception",
            error_code=exc.error_code,
            status_code=exc.status_code,
            path=request.url.path,
            details=exc.details,
        )

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return _problem(
        request,
        exc.error_code,
        exc.status_code,
        exc.message,
        extra=exc.details,
        headers=headers,
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A unique index rejected a write that no service translated."""
    logger.warning(
        "integrity_conflict",
        path=request.url.path,
        constraint=str(exc.orig).splitlines()[0] if exc.orig else None,
    )
    return _problem(
        request,
        "conflict",
        status.HTTP_409_CONFLICT,
        "The change conflicts with an existing record",
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        FieldError(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body")
            or "unknown",
            message=error.get("msg", "Invalid value"),
            type=error.get("type"),
        )
        for error in exc.errors()
    ]

    logger.warning("validation_error", path=request.url.path, error_count=len(errors))

    return _problem(
        request,
        "validation_error",
        UNPROCESSABLE,
        "Request validation failed",
        errors=errors,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure and answer with a body that reveals nothing about it."""
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return _problem(
        request,
        "internal_error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        IntegrityError, cast("ExceptionHandler", integrity_error_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)
