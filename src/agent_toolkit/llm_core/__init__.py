"""Public exports for the core tool and agent abstractions."""

from .result import Ok, Err, Result
from .exceptions import (
    LLMToolError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolExecutionError,
    ToolValidationError,
    ConfigurationError,
    ResultUnwrapError,
)
from .logger import get_logger, setup_logging
from .messages import (
    MessageRole,
    BaseMessage,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    ToolMessage,
    Conversation,
)
from .tools import (
    Schema,
    SchemaKind,
    ObjectSchema,
    ArgumentExtractor,
    ToolFunction,
    ToolSchema,
    ToolCallRequest,
    ToolCallResult,
    ToolBuilder,
    tool,
    ToolRegistry,
)
from .base import ModelClient, AssistantTurn, ClientError
from .agent import Agent, AgentOptions, AgentState, AgentStatus, LoopPhase, AgentError
from .config import ProviderConfig, BraveToolConfig, SafeSearch, load_provider_config, load_brave_search_config

__all__ = [
    "Ok",
    "Err",
    "Result",
    "LLMToolError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolValidationError",
    "ConfigurationError",
    "ResultUnwrapError",
    "get_logger",
    "setup_logging",
    "MessageRole",
    "BaseMessage",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "ToolMessage",
    "Conversation",
    "Schema",
    "SchemaKind",
    "ObjectSchema",
    "ArgumentExtractor",
    "ToolFunction",
    "ToolSchema",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolBuilder",
    "tool",
    "ToolRegistry",
    "ModelClient",
    "AssistantTurn",
    "ClientError",
    "Agent",
    "AgentOptions",
    "AgentState",
    "AgentStatus",
    "LoopPhase",
    "AgentError",
    "ProviderConfig",
    "BraveToolConfig",
    "SafeSearch",
    "load_provider_config",
    "load_brave_search_config",
]
