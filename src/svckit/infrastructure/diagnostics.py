"""Error-logging wrappers around Result values.

The pure path lives on the Result itself (``unwrap``/``unwrap_or``); the
helpers here add a log line on the failure path and nothing else.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TypeVar

from svckit.domain.models.result import Err, Result, UnwrapError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _caller_location(depth: int = 2) -> str:
    """Return "file:line" of the frame `depth` levels above this function."""
    frame = sys._getframe(depth)
    return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"


def try_log(result: Result[T, Any]) -> T:
    """Return the Ok value or log the error and raise it.

    Args:
        result: Result to unwrap

    Returns:
        The Ok value

    Raises:
        BaseException: The Err payload itself when it is an exception
        UnwrapError: When the Err payload is not an exception
    """
    if not isinstance(result, Err):
        return result.value
    location = _caller_location()
    error = result.error
    logger.error(
        f"Error at {location} - {error!r}",
        extra={"error": repr(error), "location": location},
        stacklevel=2,
    )
    if isinstance(error, BaseException):
        raise error
    raise UnwrapError(error)


def unwrap_or_log(result: Result[T, Any], default: T) -> T:
    """Return the Ok value, or log a warning and return default."""
    if not isinstance(result, Err):
        return result.value
    location = _caller_location()
    logger.warning(
        f"Unwrap failed at {location} - {result.error!r}. Using default: {default!r}",
        extra={"error": repr(result.error), "default": repr(default), "location": location},
        stacklevel=2,
    )
    return default


def log_error(result: Result[T, Any], default: T) -> T:
    """Return the Ok value, or log the error and return default."""
    if not isinstance(result, Err):
        return result.value
    logger.error(
        f"Error: {result.error!r}",
        extra={"error": repr(result.error), "default": repr(default)},
        stacklevel=2,
    )
    return default


def assert_msg(condition: Any, message: str) -> None:
    """Log and raise AssertionError when condition is falsy.

    Unlike the assert statement this check survives ``python -O``.
    """
    if not condition:
        logger.error(f"Assertion failed: {message}", stacklevel=2)
        raise AssertionError(message)
