"""
Exception Handlers Module

Every error leaves the API as JSON with a human-readable ``message``.
Validation failures add an ``errors`` list of ``{field, message}`` pairs.
"""
import logging
from typing import Any, Dict, List, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.core.errors import InvalidReferenceError, PortalError, UnauthorizedError

logger = logging.getLogger(__name__)

# Leading loc entries that name where the value came from, not the field
_LOCATIONS = {"body", "path", "query", "header", "cookie"}


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into ``{field, message}`` pairs."""
    formatted = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if len(loc) > 1 and loc[0] in _LOCATIONS:
            loc = loc[1:]
        # JSON decode errors carry a character position, not a field
        if all(isinstance(part, int) for part in loc):
            loc = []
        field = ".".join(str(part) for part in loc) or "body"
        formatted.append({"field": field, "message": error.get("msg", "Invalid value")})
    return formatted


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation error", "errors": format_validation_errors(exc.errors())},
    )


async def portal_exception_handler(request: Request, exc: PortalError) -> JSONResponse:
    content: Dict[str, Any] = {"message": exc.message}
    headers = None
    if isinstance(exc, InvalidReferenceError):
        content["errors"] = [{"field": exc.field, "message": exc.message}]
    elif isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PortalError, portal_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
