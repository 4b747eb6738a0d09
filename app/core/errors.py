"""Error taxonomy and the FastAPI handlers that turn it into `{"error": ...}` responses."""

import logging
from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class MemoryMapError(Exception):
    """Base error. `message` is the short text shown to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MemoryMapError):
    """Missing or malformed input; caused by the client, never retried."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(MemoryMapError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(MemoryMapError):
    """File could not be written to storage."""


class DataStoreError(MemoryMapError):
    """Query or insert against the record store failed."""


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _handle_app_error(request: Request, exc: MemoryMapError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    else:
        logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"Invalid field {field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """
    Turn any exception without a handler into `500 {"error": "Internal server error"}`.
    Installed before CORSMiddleware so the CORS headers still wrap the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Call before adding CORSMiddleware: middleware added later wraps the earlier ones."""
    app.add_exception_handler(MemoryMapError, _handle_app_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_middleware(UnhandledErrorMiddleware)
