"""Declarative description of the parameters a tool accepts.

A schema is a tree of frozen nodes. Object nodes hold an ordered tuple of
properties, so a tool's schema can be built once at startup and shared by
every invocation without copying::

    schema = (
        Schema.object("Search parameters")
        .with_property("query", Schema.string("The search query"))
        .with_property("count", Schema.integer("Number of results"), required=False)
    )
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple, Union

import jsonref  # type: ignore

from ...exceptions import ToolValidationError
from ...logger import get_logger
from .schema_validator import SchemaValidator

logger = get_logger(__name__)


class SchemaKind(str, Enum):
    """The JSON type a schema node describes."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


_PRIMITIVE_KINDS = (SchemaKind.STRING, SchemaKind.NUMBER, SchemaKind.INTEGER, SchemaKind.BOOLEAN)


def kind_of(value: Any) -> str:
    """Name the JSON kind of a decoded runtime value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return SchemaKind.BOOLEAN.value
    if isinstance(value, int):
        return SchemaKind.INTEGER.value
    if isinstance(value, float):
        return SchemaKind.NUMBER.value
    if isinstance(value, str):
        return SchemaKind.STRING.value
    if isinstance(value, Mapping):
        return SchemaKind.OBJECT.value
    if isinstance(value, (list, tuple)):
        return SchemaKind.ARRAY.value
    return type(value).__name__


def matches_kind(value: Any, kind: SchemaKind) -> bool:
    """Check whether a runtime value is acceptable for ``kind``.

    ``number`` accepts ints and floats, ``integer`` accepts ints and integral floats.
    Booleans never count as numbers.
    """
    if isinstance(value, bool):
        return kind is SchemaKind.BOOLEAN
    if kind is SchemaKind.STRING:
        return isinstance(value, str)
    if kind is SchemaKind.NUMBER:
        return isinstance(value, (int, float))
    if kind is SchemaKind.INTEGER:
        return isinstance(value, int) or (isinstance(value, float) and value.is_integer())
    if kind is SchemaKind.OBJECT:
        return isinstance(value, Mapping)
    if kind is SchemaKind.ARRAY:
        return isinstance(value, (list, tuple))
    return False


@dataclass(frozen=True)
class PrimitiveSchema:
    """A string, number, integer or boolean leaf, optionally restricted to an enum."""

    kind: SchemaKind
    description: str = ""
    enum: Optional[Tuple[Any, ...]] = None

    def __post_init__(self) -> None:
        if self.kind not in _PRIMITIVE_KINDS:
            raise ToolValidationError(f"'{self.kind}' is not a primitive schema kind.")
        object.__setattr__(self, "kind", SchemaKind(self.kind))
        if self.enum is not None:
            values = tuple(self.enum)
            if not values:
                raise ToolValidationError("Enumerated values must not be empty.")
            for value in values:
                if not matches_kind(value, self.kind):
                    raise ToolValidationError(
                        f"Enum value {value!r} does not match schema kind '{self.kind.value}'."
                    )
            object.__setattr__(self, "enum", values)

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.kind.value}
        if self.description:
            schema["description"] = self.description
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        return schema


@dataclass(frozen=True)
class ArraySchema:
    """A homogeneous list whose elements follow ``items``."""

    items: "SchemaNode"
    description: str = ""
    kind: ClassVar[SchemaKind] = SchemaKind.ARRAY

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "array", "items": self.items.to_json_schema()}
        if self.description:
            schema["description"] = self.description
        return schema


@dataclass(frozen=True)
class PropertyDefinition:
    """A named child of an object node."""

    name: str
    schema: "SchemaNode"
    required: bool = True

    @property
    def description(self) -> str:
        return self.schema.description


@dataclass(frozen=True)
class ObjectSchema:
    """An object with an ordered set of uniquely named properties.

    Attributes:
        description: Human-readable description of the object.
        properties: Declared properties in insertion order.
        additional_properties: Whether the object advertises free-form keys
            (used for ``dict[str, Any]`` parameters).
    """

    description: str = ""
    properties: Tuple[PropertyDefinition, ...] = field(default_factory=tuple)
    additional_properties: bool = False
    kind: ClassVar[SchemaKind] = SchemaKind.OBJECT

    def with_property(self, name: str, schema: "SchemaNode", required: bool = True) -> "ObjectSchema":
        """Return a copy of this node with one more property.

        Raises:
            ToolValidationError: If the name is empty or already declared.
        """
        if not name:
            raise ToolValidationError("Property name must not be empty.")
        if self.get_property(name) is not None:
            raise ToolValidationError(f"Property '{name}' is already declared on this object.")
        return replace(self, properties=self.properties + (PropertyDefinition(name, schema, required),))

    def get_property(self, name: str) -> Optional[PropertyDefinition]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    @property
    def property_names(self) -> List[str]:
        return [prop.name for prop in self.properties]

    @property
    def required_names(self) -> List[str]:
        return [prop.name for prop in self.properties if prop.required]

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {prop.name: prop.schema.to_json_schema() for prop in self.properties},
        }
        if self.description:
            schema["description"] = self.description
        required = self.required_names
        if required:
            schema["required"] = required
        schema["additionalProperties"] = self.additional_properties
        return schema


SchemaNode = Union[PrimitiveSchema, ArraySchema, ObjectSchema]


class Schema:
    """Factory namespace for schema nodes."""

    @staticmethod
    def object(description: str = "") -> ObjectSchema:
        return ObjectSchema(description=description)

    @staticmethod
    def string(description: str = "", enum: Optional[Sequence[str]] = None) -> PrimitiveSchema:
        return PrimitiveSchema(SchemaKind.STRING, description, tuple(enum) if enum is not None else None)

    @staticmethod
    def number(description: str = "", enum: Optional[Sequence[float]] = None) -> PrimitiveSchema:
        return PrimitiveSchema(SchemaKind.NUMBER, description, tuple(enum) if enum is not None else None)

    @staticmethod
    def integer(description: str = "", enum: Optional[Sequence[int]] = None) -> PrimitiveSchema:
        return PrimitiveSchema(SchemaKind.INTEGER, description, tuple(enum) if enum is not None else None)

    @staticmethod
    def boolean(description: str = "") -> PrimitiveSchema:
        return PrimitiveSchema(SchemaKind.BOOLEAN, description)

    @staticmethod
    def array(items: SchemaNode, description: str = "") -> ArraySchema:
        return ArraySchema(items=items, description=description)

    @classmethod
    def from_json_schema(cls, schema: Dict[str, Any]) -> ObjectSchema:
        """Build a schema tree from a JSON schema describing an object.

        ``$ref`` entries are resolved after checking for recursion, and the
        result is sanitized before conversion.

        Args:
            schema: A JSON schema, e.g. from ``BaseModel.model_json_schema()``.

        Returns:
            The equivalent object node.

        Raises:
            ToolValidationError: If the schema is recursive, is not an object,
                or uses constructs that have no schema node equivalent.
        """
        SchemaValidator.assert_no_recursive_refs(schema)
        # proxies=False ensures we get a plain dict back, not JsonRef objects
        resolved = jsonref.replace_refs(schema, proxies=False)
        sanitized = SchemaValidator.sanitize_schema(resolved)

        node = cls._node_from_json(sanitized, path="")
        if not isinstance(node, ObjectSchema):
            msg = f"Tool parameters must be described by an object schema, got '{node.kind.value}'."
            logger.error(msg)
            raise ToolValidationError(msg)
        return node

    @classmethod
    def _node_from_json(cls, schema: Dict[str, Any], path: str) -> SchemaNode:
        where = path or "<root>"
        if "anyOf" in schema or "oneOf" in schema:
            raise ToolValidationError(f"Union types are not supported at '{where}'.")

        description = schema.get("description", "")
        kind_name = cls._resolve_type(schema, where)

        if kind_name == "object":
            node = ObjectSchema(
                description=description,
                additional_properties=bool(schema.get("additionalProperties", False)),
            )
            required = set(schema.get("required", []))
            for name, child in schema.get("properties", {}).items():
                child_path = f"{path}.{name}" if path else name
                node = node.with_property(name, cls._node_from_json(child, child_path), required=name in required)
            return node

        if kind_name == "array":
            items = schema.get("items")
            if not isinstance(items, dict) or not items:
                raise ToolValidationError(f"Array at '{where}' must declare its item schema.")
            return ArraySchema(items=cls._node_from_json(items, f"{path}[]"), description=description)

        try:
            kind = SchemaKind(kind_name)
        except ValueError:
            raise ToolValidationError(f"Unsupported schema type '{kind_name}' at '{where}'.") from None

        enum = schema.get("enum")
        if enum is None and "const" in schema:
            enum = [schema["const"]]
        return PrimitiveSchema(kind, description, tuple(enum) if enum is not None else None)

    @staticmethod
    def _resolve_type(schema: Dict[str, Any], where: str) -> str:
        declared = schema.get("type")
        if isinstance(declared, list):
            non_null = [t for t in declared if t != "null"]
            if len(non_null) != 1:
                raise ToolValidationError(f"Union types are not supported at '{where}'.")
            declared = non_null[0]
        if declared is None:
            if "properties" in schema:
                return "object"
            if "items" in schema:
                return "array"
            raise ToolValidationError(f"Schema at '{where}' does not declare a type.")
        return str(declared)
