"""Checks and clean-up applied to JSON schemas before they become schema trees."""

from typing import Any, Dict, FrozenSet

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions", "default", "examples")


class SchemaValidator:
    """
    Helper class for validating and sanitizing JSON schemas for tool parameters.
    """

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Walks every ``$ref`` reachable from the root and fails on a cycle.

        Tool arguments are plain JSON documents produced by a model, so a
        self-referencing parameter type cannot be expanded into a finite tree.

        Args:
            schema: The JSON schema to check.

        Raises:
            ToolValidationError: If a recursive reference is found.
        """
        definitions = schema.get("$defs", {}) or schema.get("definitions", {})

        def walk(node: Any, visiting: FrozenSet[str]) -> None:
            if isinstance(node, list):
                for item in node:
                    walk(item, visiting)
                return
            if not isinstance(node, dict):
                return

            ref = node.get("$ref")
            if ref is None:
                for value in node.values():
                    walk(value, visiting)
                return

            if ref in visiting:
                msg = (
                    f"Recursive structure detected: {ref}. "
                    "Recursive structures are not allowed in tool inputs. "
                    "Use parent_id, lists, or a workflow loop instead."
                )
                logger.error(msg)
                raise ToolValidationError(msg)

            # e.g. #/$defs/Address
            if ref.startswith("#/"):
                target = definitions.get(ref.rsplit("/", 1)[-1])
                if target is not None:
                    walk(target, visiting | {ref})

        walk(schema, frozenset())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Cleans up a resolved schema so it can be converted into schema nodes.

        Removes metadata keys ($defs, $schema, $id, title, default, ...),
        collapses ``anyOf`` with ``null`` (Optional fields) into the inner type
        and enforces ``additionalProperties: false`` on objects that do not
        state otherwise.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if not isinstance(schema, dict):
            return schema

        cleaned = {key: value for key, value in schema.items() if key not in _METADATA_KEYS}

        variants = cleaned.get("anyOf")
        if isinstance(variants, list):
            non_null = [v for v in variants if not (isinstance(v, dict) and v.get("type") == "null")]
            if len(non_null) == 1 and isinstance(non_null[0], dict):
                # The outer description wins over the inner one
                merged = dict(non_null[0])
                if "description" in cleaned:
                    merged["description"] = cleaned["description"]
                return SchemaValidator.sanitize_schema(merged)

        if cleaned.get("type") == "object":
            cleaned.setdefault("additionalProperties", False)

        for key, value in cleaned.items():
            if key == "properties" and isinstance(value, dict):
                # Property names are data, not schema keywords
                cleaned[key] = {name: SchemaValidator.sanitize_schema(child) for name, child in value.items()}
            elif isinstance(value, dict):
                cleaned[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                cleaned[key] = [SchemaValidator.sanitize_schema(item) for item in value]

        return cleaned
