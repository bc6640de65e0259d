"""
Exception Handlers for the FastAPI Application.

Domain errors raised by the authoring layer are translated to JSON responses
carrying their HTTP status. Anything else is caught by the global handler,
which logs the full request context with an error ID and returns a 500.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from expertpress.core.errors import ExpertPressError
from expertpress.core.logging_config import get_logger
from expertpress.core.monitoring import log_error

logger = get_logger(__name__)


async def expertpress_error_handler(request: Request, exc: ExpertPressError) -> JSONResponse:
    """
    Translate a domain error into its HTTP response.

    Args:
        request: The HTTP request that caused the exception
        exc: The domain error that was raised

    Returns:
        JSONResponse with the error message and type
    """
    if exc.status_code >= 500:
        logger.error(
            f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}",
            exc_info=exc.err or exc,
        )
    elif exc.level == "critical":
        logger.warning(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "error_type": type(exc).__name__,
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "method": request.method, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ExpertPressError, expertpress_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
