"""svckit - boilerplate helpers for backend services"""

from svckit.domain.models.result import Err, Ok, Result, UnwrapError, capture, capture_async
from svckit.infrastructure.debug import SqlQuery, debug_query, json_merge, pretty_debug
from svckit.infrastructure.diagnostics import assert_msg, log_error, try_log, unwrap_or_log
from svckit.infrastructure.env import env_or_default, read_env
from svckit.infrastructure.retry import RetryPolicy, retrying, run_with_retry, run_with_retry_async
from svckit.infrastructure.timing import log_duration, time_it
from svckit.infrastructure.tracing import SpanFilter, call_with_trace, configure_tracing, current_span, span

__version__ = "0.1.0"

__all__ = [
    "Ok",
    "Err",
    "Result",
    "UnwrapError",
    "capture",
    "capture_async",
    "RetryPolicy",
    "run_with_retry",
    "run_with_retry_async",
    "retrying",
    "try_log",
    "unwrap_or_log",
    "log_error",
    "assert_msg",
    "time_it",
    "log_duration",
    "span",
    "SpanFilter",
    "current_span",
    "call_with_trace",
    "configure_tracing",
    "json_merge",
    "pretty_debug",
    "debug_query",
    "SqlQuery",
    "read_env",
    "env_or_default",
]
