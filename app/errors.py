"""Error taxonomy and the terminal error-to-response handlers.

Anticipated failures travel as values (see ``app.services.rank_items.Result``)
and are turned into responses by :func:`error_response`. Anything else that
escapes a route is caught by the handlers installed with
:func:`register_exception_handlers` and answered with a generic 500.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class AppError(Exception):
    """Base class for errors the application knows how to describe."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"message": self.message}


class ConfigurationError(AppError):
    """Required configuration is missing or malformed. Fatal at startup."""


class ValidationError(AppError):
    status_code = 400

    def __init__(self, message: str, errors: list[FieldError] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])

    def to_body(self) -> dict:
        body = super().to_body()
        if self.errors:
            body["errors"] = [e.to_dict() for e in self.errors]
        return body


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, message: str = "Rank item not found") -> None:
        super().__init__(message)


class StoreError(AppError):
    """The document store failed (connectivity, timeout, constraint)."""

    def to_body(self) -> dict:
        # Store internals never reach the client.
        return {"message": GENERIC_ERROR_MESSAGE}


class ConflictError(StoreError):
    """A write would break a uniqueness constraint."""

    status_code = 409

    def __init__(self, message: str, field_name: str | None = None) -> None:
        super().__init__(message)
        self.field = field_name

    def to_body(self) -> dict:
        body: dict = {"message": self.message}
        if self.field:
            body["field"] = self.field
        return body


def error_response(error: AppError) -> JSONResponse:
    """Translate an anticipated error into its JSON response."""
    if isinstance(error, StoreError) and not isinstance(error, ConflictError):
        logger.error("Store error: %s", error.message)
    return JSONResponse(status_code=error.status_code, content=error.to_body())


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.exception("Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path)
    return error_response(exc)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        FieldError(
            field=".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body",
            message=str(err.get("msg", "Invalid value")),
        )
        for err in exc.errors()
    ]
    return error_response(ValidationError("Malformed request body", errors))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": GENERIC_ERROR_MESSAGE})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the fault boundary. Call after all routers are included."""
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
