"""
FastAPI error handlers for Watimage.

The exception classes live in watimage.common.exceptions and are re-exported
here for the routers.
"""

import asyncio
import logging
import traceback
from functools import wraps

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from watimage.common.exceptions import (  # noqa: F401
    EmptyRegionError,
    EncodeError,
    GeometryError,
    InvalidGeometryError,
    LoadError,
    NotLoadedError,
    RangeError,
    WatimageException,
)

logger = logging.getLogger(__name__)


# Exception handlers for FastAPI
async def watimage_exception_handler(request: Request, exc: WatimageException) -> JSONResponse:
    """
    Handler for Watimage exceptions.

    Args:
        request: FastAPI request
        exc: WatimageException instance

    Returns:
        JSON response with error details
    """
    logger.error(f"WatimageException: {exc.message}", extra={"details": exc.details})

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details, "type": exc.__class__.__name__},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handler for request validation errors.

    Args:
        request: FastAPI request
        exc: Validation exception

    Returns:
        JSON response with validation error details
    """
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": ".".join(str(loc) for loc in error["loc"][1:]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    logger.warning(f"Validation error: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "Validation failed", "details": errors, "type": "ValidationError"},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler for unexpected exceptions.

    Args:
        request: FastAPI request
        exc: Any exception

    Returns:
        JSON response with generic error message
    """
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    if getattr(request.app.state, "debug", False):
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "details": {
                    "exception": str(exc),
                    "type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                },
                "type": "InternalError",
            },
        )

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": {}, "type": "InternalError"},
    )


# Maps exception types to (status_code, error_message, log_level, detail_builder)
EXCEPTION_MAPPING = {
    ValidationError: (400, "Validation failed", "warning", lambda e: {"details": e.errors()}),
    KeyError: (400, "Missing required field", "error", lambda e: {"field": str(e)}),
    ValueError: (400, "Invalid value", "error", lambda e: {"details": str(e)}),
    FileNotFoundError: (404, "File not found", "error", lambda e: {"details": str(e)}),
    PermissionError: (403, "Permission denied", "error", lambda e: {"details": str(e)}),
}


def safe_endpoint(func):
    """
    Decorator to wrap endpoint functions with error handling.

    Watimage exceptions are re-raised for the registered handler; common
    builtin exceptions are translated using EXCEPTION_MAPPING.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            if asyncio.iscoroutinefunction(func):
                return await func(*args, **kwargs)
            else:
                return func(*args, **kwargs)

        except (WatimageException, HTTPException):
            raise

        except Exception as e:
            exception_type = type(e)

            if exception_type in EXCEPTION_MAPPING:
                status_code, error_msg, log_level, detail_builder = EXCEPTION_MAPPING[
                    exception_type
                ]

                log_message = f"{exception_type.__name__} in {func.__name__}: {e}"
                if log_level == "warning":
                    logger.warning(log_message)
                else:
                    logger.error(log_message)

                detail = {"error": error_msg}
                detail.update(detail_builder(e))

                raise HTTPException(status_code=status_code, detail=detail)

            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(
                status_code=500, detail={"error": "Internal server error", "details": str(e)}
            )

    return wrapper


def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(WatimageException, watimage_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
