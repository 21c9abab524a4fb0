"""Parameter schemas, argument extraction and JSON schema handling."""

from .schema import (
    Schema,
    SchemaKind,
    SchemaNode,
    PrimitiveSchema,
    ArraySchema,
    ObjectSchema,
    PropertyDefinition,
)
from .extractor import ArgumentExtractor
from .schema_validator import SchemaValidator
from .tool_param_factory import ToolParameterFactory, FieldTuple

__all__ = [
    "Schema",
    "SchemaKind",
    "SchemaNode",
    "PrimitiveSchema",
    "ArraySchema",
    "ObjectSchema",
    "PropertyDefinition",
    "ArgumentExtractor",
    "SchemaValidator",
    "ToolParameterFactory",
    "FieldTuple",
]
