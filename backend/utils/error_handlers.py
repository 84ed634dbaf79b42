"""
Error handling decorators and utilities for API endpoints.

Centralizes how application and persistence errors become HTTP responses so
route functions only contain the happy path.
"""

from functools import wraps
from typing import Callable
import inspect
import logging

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from constants import HTTPStatus
from dtos.response.api_response import ApiResponse
from exceptions import (
    ApplicationError,
    ConfigurationError,
    RepositoryError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _to_http_error(operation_name: str, error: Exception) -> JSONResponse:
    """
    Translate an exception raised by a route into a response.

    Validation failures become a 400 envelope; everything else is logged and
    raised as an HTTPException with a 5xx status.
    """
    if isinstance(error, HTTPException):
        # Re-raise HTTPException as-is to preserve status code and detail
        raise error

    if isinstance(error, ValidationError):
        logger.warning(f"{operation_name} - Validation error: {error.message}")
        body = ApiResponse[None].fail(error.invalid_fields, error.message)
        return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content=body.model_dump())

    if isinstance(error, SQLAlchemyError):
        logger.error(f"{operation_name} - Database error: {error}", exc_info=True)
        detail = "Database operation failed"
    elif isinstance(error, ConfigurationError):
        logger.error(f"{operation_name} - Configuration error: {error.message}", exc_info=True)
        detail = f"Configuration error: {error.message}"
    elif isinstance(error, RepositoryError):
        logger.error(f"{operation_name} - Repository misuse: {error.message}", exc_info=True)
        detail = f"{operation_name} failed: {error.message}"
    elif isinstance(error, ApplicationError):
        logger.error(f"{operation_name} - Application error: {error.message}", exc_info=True)
        detail = f"{operation_name} failed: {error.message}"
    else:
        logger.error(f"{operation_name} - Unexpected error: {error}", exc_info=True)
        detail = f"{operation_name} failed. Please check server logs."

    raise HTTPException(status_code=HTTPStatus.INTERNAL_SERVER_ERROR, detail=detail) from error


def handle_api_errors(operation_name: str):
    """
    Decorator to handle common API errors consistently across endpoints.

    Args:
        operation_name: Human-readable name of the operation (e.g., "Create product")

    Example:
        @router.post("/product")
        @handle_api_errors("Create product")
        def create_product(...):
            ...
    """
    def decorator(func: Callable):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                return _to_http_error(operation_name, e)

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                return _to_http_error(operation_name, e)

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
