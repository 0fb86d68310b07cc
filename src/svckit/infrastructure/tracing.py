"""OpenTelemetry tracing spans for scoped diagnostics.

A span is entered for the duration of a block and ended on exit. The active
span lives in the OpenTelemetry context, so every thread and asyncio task
sees its own. Install ``SpanFilter`` on a handler to stamp log records with
the active span.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def configure_tracing(
    service_name: str = "svckit",
    *,
    console: bool = False,
    exporter: Optional[SpanExporter] = None,
) -> TracerProvider:
    """Install an SDK tracer provider (once) and attach exporters.

    Args:
        service_name: Value of the service.name resource attribute
        console: Export finished spans as JSON to stderr
        exporter: Extra exporter, attached with a synchronous processor

    Returns:
        The global tracer provider
    """
    provider = trace.get_tracer_provider()
    if not isinstance(provider, TracerProvider):
        provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
        trace.set_tracer_provider(provider)
        logger.debug(f"Tracer provider installed for {service_name}")
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
    if console:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    return provider


def current_span() -> Optional[trace.Span]:
    """Return the innermost active span, if any"""
    active = trace.get_current_span()
    if not active.get_span_context().is_valid:
        return None
    return active


@contextmanager
def span(name: str, **fields: Any) -> Iterator[trace.Span]:
    """Activate a span for the duration of the block.

    Exceptions raised in the block are recorded on the span and re-raised.
    Also usable as a decorator for plain functions.

    Args:
        name: Span name
        **fields: Span attributes
    """
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(name, attributes=fields or None) as active:
        yield active


def call_with_trace(name: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Call func inside span(name) and return its result"""
    with span(name):
        return func(*args, **kwargs)


class SpanFilter(logging.Filter):
    """Stamp log records with the active span name, ids and attributes"""

    def filter(self, record: logging.LogRecord) -> bool:
        active = current_span()
        if active is None:
            record.span = "-"
            record.trace_id = ""
            record.span_id = ""
            record.span_fields = {}
            return True
        context = active.get_span_context()
        record.span = getattr(active, "name", "-")
        record.trace_id = format(context.trace_id, "032x")
        record.span_id = format(context.span_id, "016x")
        record.span_fields = dict(getattr(active, "attributes", None) or {})
        return True
