"""JSON merge and debug printing helpers"""

from __future__ import annotations

import copy
import dataclasses
import json
from typing import Any, Protocol, TypeVar, runtime_checkable

import click
from pydantic import BaseModel


@runtime_checkable
class SqlQuery(Protocol):
    """Anything that can render itself as SQL text"""

    def sql(self) -> str: ...


Q = TypeVar("Q", bound=SqlQuery)


def json_merge(base: Any, other: Any) -> Any:
    """Shallow-merge two JSON objects; keys from other win.

    The result is a deep copy: it shares no nested values with either input,
    so neither input is mutated through it.
    When either side is not an object, base is returned unchanged.

    Args:
        base: Base JSON value
        other: JSON value whose keys override base

    Returns:
        Merged object, or base
    """
    if not isinstance(base, dict) or not isinstance(other, dict):
        return base
    result = copy.deepcopy(base)
    result.update(copy.deepcopy(other))
    return result


def _to_jsonable(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    return obj


def pretty_debug(obj: Any) -> None:
    """Print obj as indented JSON.

    Raises:
        TypeError: If obj contains values JSON cannot represent
    """
    click.echo(json.dumps(_to_jsonable(obj), indent=2, ensure_ascii=False))


def debug_query(query: Q) -> Q:
    """Print the SQL text of query and return the query unchanged"""
    click.echo(f"SQL Query: {query.sql()}")
    return query
