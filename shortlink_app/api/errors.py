"""
Exception handlers that give every error response the same JSON shape.

- Simple errors:      {"error": "<message>"}
- Field validation:   {"errors": {"<field>": "<message>"}}  (422)
- Unknown route:      {"error": "Not Found", "message": ..., "path": ...}
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlink_app.exceptions import RangeError, ShortLinkError, ShortNameConflictError

logger = logging.getLogger(__name__)


def format_field_error(field: str, error: Dict[str, Any]) -> str:
    """Human readable message for one pydantic error entry"""
    error_type = error.get("type")
    ctx = error.get("ctx") or {}

    if error_type == "missing":
        return f"{field} is required"
    if error_type == "string_too_short":
        return f"must be at least {ctx.get('min_length')} characters"
    if error_type == "string_too_long":
        return f"must be at most {ctx.get('max_length')} characters"
    if error_type == "string_pattern_mismatch":
        return "must contain only letters, digits, '-' or '_'"
    if error_type == "string_type":
        return "must be a string"
    if error_type == "value_error" and "error" in ctx:
        return str(ctx["error"])
    return error.get("msg", f"validation failed on '{error_type}'")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        # Unparseable JSON, or a body that is not an object at all
        if error.get("type") == "json_invalid" or loc == ("body",):
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": "invalid request"},
            )
        field = str(loc[-1]) if loc else "request"
        errors.setdefault(field, format_field_error(field, error))

    return JSONResponse(
        status_code=422,
        content={"errors": errors},
    )


async def shortlink_exception_handler(request: Request, exc: ShortLinkError) -> JSONResponse:
    if isinstance(exc, ShortNameConflictError):
        content = {"errors": {exc.field: exc.message}}
    elif isinstance(exc, RangeError):
        content = {"error": f"Invalid range parameter: {exc.message}"}
    else:
        content = {"error": exc.message}

    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        content = {
            "error": "Not Found",
            "message": "The requested resource was not found",
            "path": request.url.path,
        }
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ShortLinkError, shortlink_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
