"""Export the exception hierarchy raised by tool construction, registration and configuration."""

from .exceptions import (
    LLMToolError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolExecutionError,
    ToolValidationError,
    ConfigurationError,
    ResultUnwrapError,
)

__all__ = [
    "LLMToolError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolValidationError",
    "ConfigurationError",
    "ResultUnwrapError",
]
