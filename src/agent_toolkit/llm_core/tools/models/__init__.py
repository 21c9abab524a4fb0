"""Tool-related data models."""

from .models import ToolFunction, ToolSchema, Handler
from .tool_call import ToolCallRequest, ToolCallResult, new_call_id, normalize_arguments, to_json

__all__ = [
    "ToolFunction",
    "ToolSchema",
    "Handler",
    "ToolCallRequest",
    "ToolCallResult",
    "new_call_id",
    "normalize_arguments",
    "to_json",
]
