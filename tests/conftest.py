import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from svckit.infrastructure.tracing import configure_tracing

_EXPORTER = InMemorySpanExporter()


@pytest.fixture(scope="session", autouse=True)
def _tracer_provider():
    """Install one SDK tracer provider for the whole run"""
    configure_tracing("svckit-tests", exporter=_EXPORTER)
    yield
    _EXPORTER.shutdown()


@pytest.fixture
def span_exporter():
    """In-memory exporter holding spans finished during the test"""
    _EXPORTER.clear()
    yield _EXPORTER
    _EXPORTER.clear()
