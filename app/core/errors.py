"""
app/core/errors.py

Purpose: Error handling policies

- Registers app-wide exception handlers (404, 422, 500 JSON shapes)
- acknowledge_always: log and swallow, for webhook deliveries that must
  never see a retry-triggering status
- propagate_errors: turn failures into {success: false, ...} JSON, for the
  direct control API
"""

import functools
from typing import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import WaLinkError
from app.schemas.response import ErrorResponse, FailureResponse
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        if exc.status_code == 404:
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(status="error", message=message).model_dump(exclude_none=True)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors.
        """
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                status="error",
                message="Input validation failed",
                error=str(exc.errors())
            ).model_dump(exclude_none=True)
        )

    @app.exception_handler(WaLinkError)
    async def walink_exception_handler(request: Request, exc: WaLinkError):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(status="error", message=exc.message).model_dump(exclude_none=True)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        # Don't expose internal errors in production
        error = None if settings.is_production else str(exc)

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                status="error",
                message="Something went wrong!",
                error=error
            ).model_dump(exclude_none=True)
        )


def acknowledge_always(func: Callable[..., Awaitable]):
    """
    Runs the wrapped coroutine and swallows any exception it raises.

    The webhook platform retries deliveries that fail, so anything that goes
    wrong while processing an event is logged and the caller acknowledges
    the delivery anyway. Returns the coroutine's result, or None on failure.
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error processing webhook: {e}", exc_info=True)
            return None

    return wrapper


def propagate_errors(failure_message: str):
    """
    Decorator for control endpoints: surfaces failures to the API caller.

    WaLinkError subclasses with a 4xx status are reported with their own
    message and status. Everything else becomes a 500 carrying
    ``failure_message`` and the underlying error text.
    """
    def decorator(func: Callable[..., Awaitable]):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except WaLinkError as e:
                if e.status_code < 500:
                    return JSONResponse(
                        status_code=e.status_code,
                        content=FailureResponse(message=e.message).model_dump(exclude_none=True)
                    )
                logger.error(f"{failure_message}: {e.message}", exc_info=True)
                return JSONResponse(
                    status_code=500,
                    content=FailureResponse(message=failure_message, error=e.message).model_dump()
                )
            except Exception as e:
                logger.error(f"{failure_message}: {e}", exc_info=True)
                return JSONResponse(
                    status_code=500,
                    content=FailureResponse(message=failure_message, error=str(e)).model_dump()
                )

        return wrapper

    return decorator
