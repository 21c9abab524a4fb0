"""A minimal success/failure container used wherever an operation must not raise.

Tool handlers, the argument extractor, the registry and the model clients all
return ``Ok`` or ``Err``. Callers compose them by returning early on the first
``Err``::

    query = extractor.get_string("query")
    if query.is_err:
        return query
    return Ok(search(query.value))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from .exceptions import ResultUnwrapError

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def map(self, func: Callable[[T], U]) -> "Ok[U]":
        return Ok(func(self.value))

    def and_then(self, func: Callable[[T], "Result[U, Any]"]) -> "Result[U, Any]":
        return func(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying ``error``."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def map(self, func: Callable[[Any], Any]) -> "Err[E]":
        return self

    def and_then(self, func: Callable[[Any], Any]) -> "Err[E]":
        return self

    def unwrap(self) -> Any:
        raise ResultUnwrapError(f"Called unwrap on an error result: {self.error}")

    def unwrap_or(self, default: U) -> U:
        return default


Result = Union[Ok[T], Err[E]]
