"""Typed, validating access to the raw arguments of a tool call.

The model hands us an untyped JSON object. Handlers never touch it directly;
they read fields through an ``ArgumentExtractor`` which checks presence, kind
and enum membership against the tool schema and returns ``Err`` values
instead of raising.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ...result import Err, Ok, Result
from ..errors import InvalidEnumValue, MissingField, SchemaValidationError, TypeMismatch, UndeclaredField
from .schema import ArraySchema, ObjectSchema, PrimitiveSchema, SchemaKind, SchemaNode, kind_of, matches_kind

_ABSENT = object()


class ArgumentExtractor:
    """Read-only view over a tool call payload, checked against an object schema.

    Args:
        schema: The tool's parameter schema.
        payload: The decoded arguments from the model.
    """

    def __init__(self, schema: ObjectSchema, payload: Mapping[str, Any]) -> None:
        self._schema = schema
        self._payload = payload

    @property
    def schema(self) -> ObjectSchema:
        return self._schema

    @property
    def arguments(self) -> Mapping[str, Any]:
        """The raw payload. Prefer the typed accessors."""
        return self._payload

    def get_string(self, path: str, default: Optional[str] = None) -> Result[Optional[str], SchemaValidationError]:
        return self._get(path, SchemaKind.STRING, default)

    def get_number(
        self, path: str, default: Optional[float] = None
    ) -> Result[Optional[Union[int, float]], SchemaValidationError]:
        return self._get(path, SchemaKind.NUMBER, default)

    def get_integer(self, path: str, default: Optional[int] = None) -> Result[Optional[int], SchemaValidationError]:
        result = self._get(path, SchemaKind.INTEGER, default)
        if isinstance(result, Ok) and isinstance(result.value, float):
            return Ok(int(result.value))
        return result

    def get_boolean(self, path: str, default: Optional[bool] = None) -> Result[Optional[bool], SchemaValidationError]:
        return self._get(path, SchemaKind.BOOLEAN, default)

    def get_object(
        self, path: str, default: Optional[Dict[str, Any]] = None
    ) -> Result[Optional[Dict[str, Any]], SchemaValidationError]:
        return self._get(path, SchemaKind.OBJECT, default)

    def get_array(self, path: str, default: Optional[List[Any]] = None) -> Result[Optional[List[Any]], SchemaValidationError]:
        result = self._get(path, SchemaKind.ARRAY, default)
        if isinstance(result, Ok) and isinstance(result.value, tuple):
            return Ok(list(result.value))
        return result

    def validate(self) -> Result[Mapping[str, Any], SchemaValidationError]:
        """Validate the whole payload against the schema.

        Returns:
            ``Ok(payload)`` or the first error found, in property order.
        """
        error = _check_value(self._payload, self._schema, "")
        if error is not None:
            return Err(error)
        return Ok(self._payload)

    def _get(self, path: str, kind: SchemaKind, default: Any) -> Result[Any, SchemaValidationError]:
        located = self._locate(path)
        if isinstance(located, Err):
            return located
        node, value = located.value

        if node.kind is not kind:
            return Err(TypeMismatch(path, expected=node.kind.value, actual=f"a {kind.value} accessor"))

        if value is _ABSENT:
            return Ok(default)

        error = _check_value(value, node, path)
        if error is not None:
            return Err(error)
        return Ok(value)

    def _locate(self, path: str) -> Result[Tuple[SchemaNode, Any], SchemaValidationError]:
        """Walk a dotted path through schema and payload together.

        A field is missing only when its parent object is present; below an
        absent optional object every path is absent.

        Returns:
            The schema node at the path and the payload value (``_ABSENT``
            when missing or null).
        """
        if not path:
            return Err(UndeclaredField(path))

        node: SchemaNode = self._schema
        current: Any = self._payload
        walked: List[str] = []

        for name in path.split("."):
            if not isinstance(node, ObjectSchema):
                return Err(UndeclaredField(path))
            prop = node.get_property(name)
            if prop is None:
                return Err(UndeclaredField(path))

            walked.append(name)
            node = prop.schema

            if current is _ABSENT:
                continue
            if not isinstance(current, Mapping):
                parent = ".".join(walked[:-1])
                return Err(TypeMismatch(parent, expected=SchemaKind.OBJECT.value, actual=kind_of(current)))

            value = current.get(name)
            if value is None:
                if prop.required:
                    return Err(MissingField(".".join(walked)))
                current = _ABSENT
            else:
                current = value

        return Ok((node, current))


def _check_value(value: Any, node: SchemaNode, path: str) -> Optional[SchemaValidationError]:
    """Recursively validate ``value`` against ``node``; return the first error or None."""
    if not matches_kind(value, node.kind):
        return TypeMismatch(path, expected=node.kind.value, actual=kind_of(value))

    if isinstance(node, PrimitiveSchema):
        if node.enum is not None and value not in node.enum:
            return InvalidEnumValue(path, value=value, allowed=node.enum)
        return None

    if isinstance(node, ArraySchema):
        for index, item in enumerate(value):
            error = _check_value(item, node.items, f"{path}[{index}]")
            if error is not None:
                return error
        return None

    for prop in node.properties:
        child_path = f"{path}.{prop.name}" if path else prop.name
        child = value.get(prop.name)
        if child is None:
            if prop.required:
                return MissingField(child_path)
            continue
        error = _check_value(child, prop.schema, child_path)
        if error is not None:
            return error
    return None
