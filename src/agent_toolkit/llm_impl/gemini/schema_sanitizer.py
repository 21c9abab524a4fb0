"""
Adapt tool parameter schemas to what the Gemini API accepts.

Gemini's function declarations take an OpenAPI-style subset of JSON schema:
``additionalProperties`` is rejected, and ``required`` may only name declared
properties.
"""

from typing import Dict, Any, Optional, Set, cast
from functools import singledispatch

_UNSUPPORTED_KEYS = frozenset({"additionalProperties"})


def sanitize(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Performs all necessary, recursive sanitization steps on a tool schema.

    Args:
        schema: The tool parameter schema to sanitize.

    Returns:
        A sanitized copy; the input is left untouched.
    """
    return cast(Dict[str, Any], _recursive_sanitize(schema, set()))


def declaration_parameters(schema: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Sanitized parameters for a function declaration, or None for tools without parameters.

    Gemini rejects an ``OBJECT`` schema with empty ``properties``.
    """
    if not schema.get("properties"):
        return None
    return sanitize(schema)


@singledispatch
def _recursive_sanitize(schema: Any, seen: Set[int]) -> Any:
    return schema


@_recursive_sanitize.register(dict)
def _(schema: dict, seen: Set[int]) -> dict:
    obj_id = id(schema)
    if obj_id in seen:
        return schema  # Circular reference
    seen.add(obj_id)

    at_level = _ensure_required_params(schema)
    result = {
        key: _recursive_sanitize(value, seen) for key, value in at_level.items() if key not in _UNSUPPORTED_KEYS
    }

    seen.remove(obj_id)
    return result


@_recursive_sanitize.register(list)
def _(schema: list, seen: Set[int]) -> list:
    obj_id = id(schema)
    if obj_id in seen:
        return schema
    seen.add(obj_id)

    result = [_recursive_sanitize(item, seen) for item in schema]

    seen.remove(obj_id)
    return result


def _ensure_required_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop ``required`` entries that are not declared properties, keeping their order."""
    if "required" not in params or not isinstance(params.get("properties"), dict):
        return params

    _params = params.copy()
    declared = _params["properties"]
    valid_required = [name for name in _params["required"] if name in declared]

    if valid_required:
        _params["required"] = valid_required
    else:
        _params.pop("required", None)

    return _params
