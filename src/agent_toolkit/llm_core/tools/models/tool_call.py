"""Data models for a single tool call and its outcome."""

from __future__ import annotations

import dataclasses
import json
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping

from pydantic import BaseModel

from ...result import Err, Ok, Result
from ..errors import MalformedArguments, ToolCallError


def new_call_id() -> str:
    """Generate a call identifier for providers that do not issue one."""
    return f"call_{uuid.uuid4().hex[:24]}"


@dataclass(frozen=True)
class ToolCallRequest:
    """Represents a normalized tool call request from an LLM response.

    Attributes:
        name: The tool the model wants to call. May not exist.
        arguments: Raw arguments as emitted by the model (JSON text or a mapping).
        call_id: Identifier pairing this request with its tool-result message.
    """

    name: str
    arguments: Any
    call_id: str = dataclasses.field(default_factory=new_call_id)


@dataclass(frozen=True)
class ToolCallResult:
    """Represents the outcome of executing a tool call.

    ``response`` is ``{"result": ...}`` on success and ``{"error": "..."}`` on failure.
    """

    name: str
    call_id: str
    response: Dict[str, Any]

    @property
    def is_error(self) -> bool:
        return "error" in self.response

    @property
    def content(self) -> str:
        """The response serialized as JSON text."""
        return to_json(self.response)

    @classmethod
    def from_result(cls, request: ToolCallRequest, outcome: Result[Any, ToolCallError]) -> "ToolCallResult":
        if isinstance(outcome, Err):
            return cls(name=request.name, call_id=request.call_id, response={"error": outcome.error.message})
        return cls(name=request.name, call_id=request.call_id, response={"result": outcome.value})


def normalize_arguments(raw_args: Any) -> Result[Dict[str, Any], MalformedArguments]:
    """Normalize tool arguments into a dictionary.

    Handles JSON strings, mappings, or None values.

    Args:
        raw_args: The raw arguments (mapping, string, or None).

    Returns:
        The decoded arguments, or ``MalformedArguments`` if they are not a JSON object.
    """
    if raw_args is None or raw_args == "":
        return Ok({})

    if isinstance(raw_args, Mapping):
        return Ok(dict(raw_args))

    if isinstance(raw_args, (str, bytes)):
        try:
            parsed = json.loads(raw_args)
        except json.JSONDecodeError as exc:
            return Err(MalformedArguments(path="", reason=str(exc)))

        if parsed is None:
            return Ok({})
        if not isinstance(parsed, dict):
            return Err(MalformedArguments(path="", reason="Function arguments must decode to a JSON object."))
        return Ok(parsed)

    return Err(MalformedArguments(path="", reason=f"Unsupported argument payload of type {type(raw_args).__name__}."))


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def to_json(value: Any) -> str:
    """Serialize a tool output for the conversation."""
    return json.dumps(value, default=_json_default, ensure_ascii=False)
