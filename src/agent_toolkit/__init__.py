"""Agent Toolkit - typed tool definitions and a provider-agnostic agent loop for LLMs."""

from .llm_core import (
    Agent,
    AgentOptions,
    AgentState,
    AgentStatus,
    AgentError,
    Conversation,
    Ok,
    Err,
    Result,
    Schema,
    ToolBuilder,
    ToolFunction,
    ToolRegistry,
    tool,
)
from .llm_impl import create_client, GeminiModelClient, OpenAIModelClient

__all__ = [
    "Agent",
    "AgentOptions",
    "AgentState",
    "AgentStatus",
    "AgentError",
    "Conversation",
    "Ok",
    "Err",
    "Result",
    "Schema",
    "ToolBuilder",
    "ToolFunction",
    "ToolRegistry",
    "tool",
    "create_client",
    "GeminiModelClient",
    "OpenAIModelClient",
]
