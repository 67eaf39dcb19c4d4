"""
Error taxonomy for the Todo API and the handlers that render it as JSON.

Every error response has the shape ``{"error": <message>}``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"
ENDPOINT_NOT_FOUND_MESSAGE = "Endpoint not found"
INVALID_ID_MESSAGE = "Invalid todo ID"
INVALID_BODY_MESSAGE = "Invalid request body"


class TodoApiError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TodoValidationError(TodoApiError):
    """Client input was malformed or missing."""

    status_code = status.HTTP_400_BAD_REQUEST


class TodoNotFoundError(TodoApiError):
    """No Todo exists with the requested id."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, todo_id: int) -> None:
        super().__init__("Todo not found")
        self.todo_id = todo_id


class StoreError(TodoApiError):
    """The underlying database failed; the original exception is the cause."""


def _error_body(message: str) -> Dict[str, Any]:
    return {"error": message}


# PUBLIC_INTERFACE
def validation_message(errors: Iterable[Dict[str, Any]], default: str = INVALID_BODY_MESSAGE) -> str:
    """
    Pick a client-facing message from pydantic/FastAPI error details.

    Messages raised by our own validators travel in ``ctx["error"]`` and are
    returned verbatim. A failure on a path parameter means the todo id was not
    an integer. Anything else falls back to ``default``.
    """
    for err in errors:
        loc = tuple(err.get("loc") or ())
        if loc and loc[0] == "path":
            return INVALID_ID_MESSAGE
        ctx_error = (err.get("ctx") or {}).get("error")
        if isinstance(ctx_error, Exception):
            return str(ctx_error)
    return default


async def todo_api_error_handler(request: Request, exc: TodoApiError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error(
            "Database error on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc.__cause__ or exc,
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(INTERNAL_ERROR_MESSAGE))
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return 400 with a single message for request validation errors.

    The only route that binds a body model is POST /api/todos, so a body
    error without a message of our own means the text was not usable.
    """
    default = "Text is required and cannot be empty" if request.method == "POST" else INVALID_BODY_MESSAGE
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(validation_message(exc.errors(), default)),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Router misses surface as 404 (unknown path) or 405 (known path, wrong method)
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(ENDPOINT_NOT_FOUND_MESSAGE))
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(INTERNAL_ERROR_MESSAGE),
    )


# PUBLIC_INTERFACE
def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on ``app``."""
    app.add_exception_handler(TodoApiError, todo_api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
