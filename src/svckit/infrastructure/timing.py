"""Timing helpers that report how long a block took"""

from __future__ import annotations

import logging
import time
from contextlib import ContextDecorator
from typing import Callable, Optional

import click

logger = logging.getLogger(__name__)


def format_elapsed(seconds: float) -> str:
    """Format a duration for humans (e.g. 12.34ms, 1.502s)"""
    if seconds < 1e-3:
        return f"{seconds * 1e6:.2f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.2f}ms"
    return f"{seconds:.3f}s"


class Timer(ContextDecorator):
    """Measure wall-clock time of a block and hand it to a reporter.

    Usable as a context manager or as a decorator for plain functions.
    Nothing is reported when the block raises.
    """

    def __init__(self, label: str, report: Callable[[str, float], None]):
        self.label = label
        self._report = report
        self._start: Optional[float] = None
        self.elapsed: Optional[float] = None

    def _recreate_cm(self) -> "Timer":
        # Each decorated call gets its own start time
        return type(self)(self.label, self._report)

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self.elapsed = None
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.elapsed = time.perf_counter() - self._start
        if exc_type is None:
            self._report(self.label, self.elapsed)
        return False


def _echo_elapsed(label: str, elapsed: float) -> None:
    click.echo(f"{label} took {format_elapsed(elapsed)}")


def _log_elapsed(label: str, elapsed: float) -> None:
    logger.info(
        f"{label} took {format_elapsed(elapsed)}",
        extra={"label": label, "elapsed": elapsed},
    )


def time_it(label: str) -> Timer:
    """Print "<label> took <elapsed>" to stdout when the block finishes"""
    return Timer(label, _echo_elapsed)


def log_duration(label: str) -> Timer:
    """Log "<label> took <elapsed>" at INFO when the block finishes"""
    return Timer(label, _log_elapsed)
