"""Error values produced while resolving, validating and executing a single tool call.

None of these are exceptions. They travel inside ``Err`` and end up as the
content of a tool-result message so the model can see what went wrong and adapt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class SchemaValidationError:
    """Base class for argument validation failures."""

    path: str

    @property
    def message(self) -> str:
        return f"Invalid argument '{self.path}'."

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class MissingField(SchemaValidationError):
    """A required field is absent from the payload."""

    @property
    def message(self) -> str:
        return f"Missing required field '{self.path}'."


@dataclass(frozen=True)
class TypeMismatch(SchemaValidationError):
    """A field holds a value of a different kind than declared."""

    expected: str = ""
    actual: str = ""

    @property
    def message(self) -> str:
        return f"Field '{self.path}' expected {self.expected} but got {self.actual}."


@dataclass(frozen=True)
class InvalidEnumValue(SchemaValidationError):
    """A field holds a value outside its enumerated set."""

    value: Any = None
    allowed: Tuple[Any, ...] = field(default_factory=tuple)

    @property
    def message(self) -> str:
        allowed = ", ".join(repr(v) for v in self.allowed)
        return f"Field '{self.path}' has invalid value {self.value!r}. Allowed values: {allowed}."


@dataclass(frozen=True)
class UndeclaredField(SchemaValidationError):
    """A handler asked for a path the tool schema does not declare."""

    @property
    def message(self) -> str:
        return f"Field '{self.path}' is not declared in the tool schema."


@dataclass(frozen=True)
class MalformedArguments(SchemaValidationError):
    """The raw arguments could not be decoded into a JSON object."""

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Failed to parse tool arguments: {self.reason}"


@dataclass(frozen=True)
class UnknownTool:
    """The model asked for a tool that is not registered."""

    name: str
    available: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def message(self) -> str:
        available = ", ".join(self.available) if self.available else "none"
        return f"Tool '{self.name}' not found in registry. Available tools: {available}."

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ToolFailure:
    """The handler ran but failed, raised, or timed out."""

    tool_name: str
    reason: str

    @property
    def message(self) -> str:
        return f"Tool '{self.tool_name}' failed: {self.reason}"

    def __str__(self) -> str:
        return self.message


ToolCallError = Union[SchemaValidationError, UnknownTool, ToolFailure]
