"""Result model - two-variant outcome of a fallible operation"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Tuple, Type, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


class UnwrapError(Exception):
    """Raised when the value of an Err result is requested."""

    def __init__(self, error: Any):
        self.error = error
        super().__init__(f"Called unwrap on Err: {error!r}")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome"""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Any:
        raise UnwrapError(self.value)

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome"""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise UnwrapError(self.error)

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok[T], Err[E]]


def is_result(value: Any) -> bool:
    """Check if value is an Ok or Err"""
    return isinstance(value, (Ok, Err))


def capture(
    func: Callable[..., T],
    *args: Any,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> Result[T, BaseException]:
    """Call func and turn the listed exceptions into an Err.

    Args:
        func: Callable to invoke
        *args: Positional arguments for func
        exceptions: Exception types converted to Err (others propagate)
        **kwargs: Keyword arguments for func

    Returns:
        Ok with the return value, or Err with the raised exception
    """
    try:
        return Ok(func(*args, **kwargs))
    except exceptions as e:
        return Err(e)


async def capture_async(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> Result[T, BaseException]:
    """Await func and turn the listed exceptions into an Err."""
    try:
        return Ok(await func(*args, **kwargs))
    except exceptions as e:
        return Err(e)
