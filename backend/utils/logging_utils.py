"""
Logging Setup and Structured Logging Utilities

configure_logging() installs the rotating file and console handlers used by
the service. StructuredLogger and log_operation add request-scoped context
(request id, product id, operation name) to log records.
"""

import inspect
import logging
import sys
from contextvars import ContextVar
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from constants import LogConfig


# Context variable for request-scoped logging context
_logging_context: ContextVar[Dict[str, Any]] = ContextVar('logging_context', default={})

# Argument names copied into the log context by log_operation
CONTEXT_KEYS = ("product_id", "request_id")


def configure_logging(log_dir: Path, level: str = "INFO") -> Path:
    """
    Configure the root logger with a rotating file handler and stdout.

    Calling it again replaces the handlers it installed before.

    Args:
        log_dir: Directory for the log file (created if missing)
        level: Root log level name

    Returns:
        Path of the log file
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LogConfig.FILE_NAME

    log_formatter = logging.Formatter(LogConfig.FORMAT)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LogConfig.MAX_BYTES,
        backupCount=LogConfig.BACKUP_COUNT,
        encoding='utf-8'
    )
    file_handler.setFormatter(log_formatter)
    file_handler._product_catalog_handler = True

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler._product_catalog_handler = True

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, '_product_catalog_handler', False):
            root_logger.removeHandler(handler)
            handler.close()

    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    return log_file


class StructuredLogger:
    """
    Wrapper around standard logger that adds structured context.

    Usage:
        logger = StructuredLogger(__name__)
        logger.info("Product created", extra={"product_id": product.id})
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _add_context(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        context = _logging_context.get().copy()
        if extra:
            context.update(extra)
        return context

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.logger.debug(message, extra=self._add_context(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.logger.info(message, extra=self._add_context(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.logger.warning(message, extra=self._add_context(extra))

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        self.logger.error(message, extra=self._add_context(extra), exc_info=exc_info)


def set_logging_context(**kwargs):
    """
    Set logging context for the current request/operation.

    Example:
        set_logging_context(request_id="abc-123")
    """
    context = _logging_context.get().copy()
    context.update(kwargs)
    _logging_context.set(context)


def get_logging_context() -> Dict[str, Any]:
    return _logging_context.get().copy()


def clear_logging_context():
    """Clear the logging context."""
    _logging_context.set({})


def _operation_context(operation_name: str, args, kwargs) -> Dict[str, Any]:
    context = {"operation": operation_name}
    for key in CONTEXT_KEYS:
        if key in kwargs:
            context[key] = kwargs[key]
    # Handlers take a command/query object; pull the product id off it
    for value in list(args) + list(kwargs.values()):
        product_id = getattr(value, "product_id", None)
        if isinstance(product_id, str):
            context.setdefault("product_id", product_id)
    return context


def log_operation(operation_name: str):
    """
    Decorator to log operation start, completion and failure with context.

    Failures are logged and re-raised unchanged.

    Example:
        @log_operation("create_product")
        def handle(self, command): ...
    """
    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)
            context = _operation_context(operation_name, args, kwargs)
            logger.debug(f"Starting {operation_name}", extra=context)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                context["error"] = str(e)
                context["error_type"] = type(e).__name__
                logger.error(f"Failed {operation_name}: {e}", extra=context, exc_info=True)
                raise
            logger.info(f"Completed {operation_name}", extra=context)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)
            context = _operation_context(operation_name, args, kwargs)
            logger.debug(f"Starting {operation_name}", extra=context)
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                context["error"] = str(e)
                context["error_type"] = type(e).__name__
                logger.error(f"Failed {operation_name}: {e}", extra=context, exc_info=True)
                raise
            logger.info(f"Completed {operation_name}", extra=context)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
