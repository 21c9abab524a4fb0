"""Tool definition, validation and dispatch."""

from .errors import (
    SchemaValidationError,
    MissingField,
    TypeMismatch,
    InvalidEnumValue,
    UndeclaredField,
    MalformedArguments,
    UnknownTool,
    ToolFailure,
    ToolCallError,
)
from .schema import Schema, SchemaKind, ObjectSchema, ArgumentExtractor, SchemaValidator
from .models import ToolFunction, ToolSchema, ToolCallRequest, ToolCallResult
from .builder import ToolBuilder, tool
from .registry import ToolRegistry

__all__ = [
    "SchemaValidationError",
    "MissingField",
    "TypeMismatch",
    "InvalidEnumValue",
    "UndeclaredField",
    "MalformedArguments",
    "UnknownTool",
    "ToolFailure",
    "ToolCallError",
    "Schema",
    "SchemaKind",
    "ObjectSchema",
    "ArgumentExtractor",
    "SchemaValidator",
    "ToolFunction",
    "ToolSchema",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolBuilder",
    "tool",
    "ToolRegistry",
]
