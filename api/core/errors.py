"""
JSON error rendering for the whole app.

Every failure leaves the API as `{"message": ..., "error": ...}`. `error`
carries detail only when APP_ENV=development; otherwise it is `{}`.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import settings

logger = logging.getLogger(__name__)

# Pydantic error types that mean "the client left the field out or empty".
_MISSING_ERROR_TYPES = {"missing", "string_too_short"}


def error_body(message: str, *, status_code: int, error_type: str) -> dict[str, Any]:
    error: dict[str, Any] = {}
    if settings.is_development():
        error = {"status": status_code, "type": error_type}
    return {"message": message, "error": error}


def describe_validation_errors(errors: list[dict[str, Any]]) -> str:
    """
    Turn FastAPI request-validation errors into one human-readable line.
    """
    missing: list[str] = []
    invalid: list[str] = []
    for err in errors:
        loc = tuple(err.get("loc") or ())
        err_type = str(err.get("type") or "")

        if err_type == "json_invalid":
            return "Request body is not valid JSON."
        if loc[:1] != ("body",):
            return "Invalid request parameters."
        if len(loc) < 2 or not isinstance(loc[1], str):
            if err_type == "missing":
                return "Request body is required."
            return "Request body must be a JSON object."

        field = loc[1]
        target = missing if err_type in _MISSING_ERROR_TYPES else invalid
        if field not in target:
            target.append(field)

    parts: list[str] = []
    if missing:
        parts.append(f"Missing required fields: {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid fields: {', '.join(invalid)}")
    return "; ".join(parts) or "Invalid request."


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Also the catch-all for unmatched routes (Starlette raises 404/405 here).
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), status_code=exc.status_code, error_type="http"),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            describe_validation_errors(list(exc.errors())),
            status_code=status.HTTP_400_BAD_REQUEST,
            error_type="validation",
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    status_code = int(getattr(exc, "status_code", status.HTTP_500_INTERNAL_SERVER_ERROR))
    message = str(exc) if settings.is_development() else "Internal Server Error"
    return JSONResponse(
        status_code=status_code,
        content=error_body(message, status_code=status_code, error_type=type(exc).__name__),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
