"""
Error taxonomy and exception handlers shared by both services
"""
import logging
import os
import traceback
from typing import Optional, Dict, Any
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import sentry_sdk

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception"""
    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(AppException):
    """Client-supplied reading fails a stated constraint"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class StorageException(AppException):
    """Persistence layer failure"""
    def __init__(self, message: str = "Storage failure", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)


class ForwardingException(AppException):
    """
    Threshold Evaluator unreachable, erroring or timed out.
    Absorbed at the intake boundary, never rendered to a client.
    """
    def __init__(self, message: str = "Evaluator call failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=502, details=details)


def log_error(error: Exception, request: Optional[Request] = None, context: Optional[Dict[str, Any]] = None):
    """
    Log error with context and send to Sentry if configured
    """
    error_context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if request:
        error_context.update({
            "path": request.url.path,
            "method": request.method,
            "client": request.client.host if request.client else None,
        })

    if context:
        error_context.update(context)

    logger.error(f"Error occurred: {error_context}")

    # No-op unless sentry_sdk.init() was called
    sentry_sdk.capture_exception(error)


async def app_exception_handler(request: Request, exc: AppException):
    """Handle application exceptions"""
    log_error(exc, request)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.message,
                "type": type(exc).__name__,
                "details": exc.details,
            }
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported like any other validation failure"""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    log_error(exc, request, {"validation_errors": errors})

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "message": "Validation error",
                "type": "ValidationException",
                "details": {
                    "errors": errors
                }
            }
        }
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    log_error(exc, request)

    # Don't expose internal errors in production
    is_development = os.getenv("ENVIRONMENT", "development") == "development"

    error_detail = {
        "message": str(exc) if is_development else "Internal server error",
        "type": type(exc).__name__,
    }

    if is_development:
        error_detail["traceback"] = traceback.format_exception(type(exc), exc, exc.__traceback__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": error_detail
        }
    )


def register_exception_handlers(app):
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
