"""Standardized Error Handling Utilities

Provides the exception hierarchy of the conformance harness and consistent
logging helpers for the places where an error is converted, reported or
deliberately tolerated (best-effort cleanup).
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable
from contextlib import contextmanager
from enum import Enum
from typing import Any


class ErrorLevel(Enum):
    """Error severity levels for consistent logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class GifConformError(Exception):
    """Base exception class for all conformance harness errors."""

    def __init__(
        self, message: str, cause: Exception | None = None, context: dict | None = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.cause:
            return f"{base_msg} (caused by: {self.cause})"
        return base_msg


class ValidationError(GifConformError):
    """Raised when a precondition on inputs or configuration is violated."""

    pass


class ReconciliationError(GifConformError):
    """Raised when decoded frame counts or sizes contradict the configuration.

    Always fatal to a verification run.
    """

    pass


class EncodingError(GifConformError):
    """Raised when an animation cannot be encoded."""

    pass


class DecodingError(GifConformError):
    """Raised when an encoded stream cannot be decoded."""

    pass


class FrameReleasedError(GifConformError):
    """Raised when the pixels of an already released frame are accessed."""

    pass


def handle_error(
    error: Exception,
    operation: str,
    error_type: type[GifConformError] = EncodingError,
    level: ErrorLevel = ErrorLevel.ERROR,
    context: dict | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Log *error* and re-raise it as *error_type*, chained to the original.

    Args:
        error: Original exception that occurred
        operation: Description of operation that failed
        error_type: Type of GifConformError to raise
        level: Logging level for the error
        context: Additional context information
        logger: Logger to use (defaults to module logger)

    Raises:
        GifConformError: Always, as an instance of error_type
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    message = f"Failed to {operation}: {error}"

    error_context = dict(context or {})
    error_context.update(
        {
            "operation": operation,
            "original_error_type": type(error).__name__,
            "original_error_message": str(error),
        }
    )

    transformed_error = error_type(message, cause=error, context=error_context)

    log_message = f"🚨 {operation.capitalize()} failed: {error}"
    context_str = ", ".join(f"{k}={v}" for k, v in error_context.items())
    if context_str:
        log_message += f" (context: {context_str})"

    log_func = getattr(logger, level.value)
    log_func(log_message)

    if level in [ErrorLevel.ERROR, ErrorLevel.CRITICAL]:
        logger.debug(f"Traceback for {operation}: {traceback.format_exc()}")

    raise transformed_error from error


@contextmanager
def error_context(
    operation: str,
    error_type: type[GifConformError] = EncodingError,
    level: ErrorLevel = ErrorLevel.ERROR,
    context: dict | None = None,
    logger: logging.Logger | None = None,
) -> Any:
    """Context manager for standardized error handling.

    Usage:
        with error_context("decode GIF stream", DecodingError, context={"bytes": 1024}):
            risky_operation()

    Args:
        operation: Description of operation being performed
        error_type: Type of GifConformError to raise on failure
        level: Logging level for errors
        context: Additional context information
        logger: Logger to use
    """
    try:
        yield
    except GifConformError:
        raise
    except Exception as e:
        handle_error(e, operation, error_type, level, context, logger)


def log_warning_with_context(
    message: str, context: dict | None = None, logger: logging.Logger | None = None
) -> None:
    """Log a warning with standardized context formatting."""
    if logger is None:
        logger = logging.getLogger(__name__)

    warning_msg = f"⚠️  {message}"
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        warning_msg += f" (context: {context_str})"

    logger.warning(warning_msg)


def log_info_with_context(
    message: str, context: dict | None = None, logger: logging.Logger | None = None
) -> None:
    """Log an info message with standardized context formatting."""
    if logger is None:
        logger = logging.getLogger(__name__)

    info_msg = f"ℹ️  {message}"
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        info_msg += f" (context: {context_str})"

    logger.info(info_msg)


def safe_operation(
    operation_func: Callable[[], Any],
    operation_name: str,
    context: dict | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Run a best-effort cleanup step, logging instead of raising on failure.

    A failing cleanup must never mask the error or result of the operation
    it cleans up after.

    Args:
        operation_func: Cleanup to execute
        operation_name: Description of the cleanup
        context: Additional context
        logger: Logger to use
    """
    try:
        with error_context(operation_name, GifConformError, ErrorLevel.WARNING, context, logger):
            operation_func()
    except GifConformError as e:
        log_warning_with_context(f"Safe operation '{operation_name}' failed: {e}", logger=logger)
