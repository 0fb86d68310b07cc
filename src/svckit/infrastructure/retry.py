"""Bounded retry utilities using tenacity.

Two executors share one state machine: call the operation, return on Ok,
return the last Err once ``max_attempts`` calls have failed, otherwise wait a
fixed delay and call again. ``run_with_retry`` blocks the calling thread
during the wait, ``run_with_retry_async`` awaits it.

Operations report failure by returning ``Err``. An operation that raises is
not retried and the exception propagates unchanged. For code that signals
failure by raising, use the ``retrying`` decorator instead.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from svckit.domain.config.retry import RetryConfig
from svckit.domain.models.result import Err, Result, is_result

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt limit and fixed inter-attempt delay for one retry session.

    Attributes:
        max_attempts: Total number of calls allowed, the first one included
        delay: Seconds to wait between a failed attempt and the next one
    """

    max_attempts: int = 3
    delay: float = 1.0

    def __post_init__(self):
        """Validate policy values"""
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise ValueError(f"max_attempts must be an integer, got {self.max_attempts!r}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")

    @classmethod
    def from_millis(cls, max_attempts: int, delay_ms: float) -> "RetryPolicy":
        """Create policy with the delay given in milliseconds"""
        return cls(max_attempts=max_attempts, delay=delay_ms / 1000.0)

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        """Create policy from the retry configuration section"""
        return cls.from_millis(config.max_attempts, config.delay_ms)


def _is_failure(result: Any) -> bool:
    """Check if an attempt outcome should trigger another attempt."""
    if not is_result(result):
        raise TypeError(f"Retry operation must return Ok or Err, got {type(result).__name__}")
    return isinstance(result, Err)


def _last_outcome(retry_state: RetryCallState) -> Any:
    """Hand back the final attempt's Err instead of raising RetryError"""
    return retry_state.outcome.result()


def _retrying_kwargs(policy: RetryPolicy) -> dict:
    return {
        "stop": stop_after_attempt(policy.max_attempts),
        "wait": wait_fixed(policy.delay),
        "retry": retry_if_result(_is_failure),
        "retry_error_callback": _last_outcome,
    }


def run_with_retry(
    operation: Callable[[], Result[T, E]],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> Result[T, E]:
    """Run operation until it returns Ok or the policy is exhausted.

    The calling thread is blocked for the whole session, waits included.

    Args:
        operation: Zero-argument callable returning Ok or Err
        policy: Attempt limit and delay
        sleep: Blocking sleep used between attempts

    Returns:
        The first Ok, or the Err from the final attempt

    Raises:
        TypeError: If operation returns something other than Ok or Err
    """
    retryer = Retrying(sleep=sleep, **_retrying_kwargs(policy))
    return retryer(operation)


async def run_with_retry_async(
    operation: Callable[[], Awaitable[Result[T, E]]],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Result[T, E]:
    """Await operation until it returns Ok or the policy is exhausted.

    Same contract as run_with_retry, but both the operation and the wait are
    suspension points, so other tasks run in the meantime. Cancelling the
    surrounding task stops the session: CancelledError propagates and no
    further attempt is made.

    Args:
        operation: Zero-argument coroutine function returning Ok or Err
        policy: Attempt limit and delay
        sleep: Awaitable sleep used between attempts

    Returns:
        The first Ok, or the Err from the final attempt
    """
    retryer = AsyncRetrying(sleep=sleep, **_retrying_kwargs(policy))
    return await retryer(operation)


def retrying(
    policy: RetryPolicy,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    *,
    sleep: Optional[Callable[[float], Any]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Create a retry decorator for functions that fail by raising.

    Works for plain and coroutine functions. On exhaustion the exception from
    the final attempt is re-raised as is. Exceptions outside retry_on
    propagate on the first occurrence.

    Args:
        policy: Attempt limit and delay
        retry_on: Exception types that trigger another attempt
        sleep: Sleep used between attempts. Defaults to asyncio.sleep for
            coroutine functions and time.sleep otherwise

    Returns:
        Retry decorator
    """
    kwargs = {
        "stop": stop_after_attempt(policy.max_attempts),
        "wait": wait_fixed(policy.delay),
        "retry": retry_if_exception_type(retry_on),
        "reraise": True,
    }

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(func):
            return AsyncRetrying(sleep=sleep or asyncio.sleep, **kwargs).wraps(func)
        return Retrying(sleep=sleep or time.sleep, **kwargs).wraps(func)

    return decorator
