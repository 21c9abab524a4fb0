"""
Custom exception classes for the agent toolkit.

Only setup-time problems are raised: building a tool, assembling a registry or
loading configuration. Everything that can go wrong while a run is in progress
is returned as a ``Result`` value instead.
"""


class LLMToolError(Exception):
    """Base exception for all toolkit errors."""

    pass


class ToolRegistrationError(LLMToolError):
    """Raised when a set of tools cannot be assembled into a registry."""

    pass


class ToolNotFoundError(LLMToolError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ToolExecutionError(LLMToolError):
    """Raised when a tool fails during execution.

    Never leaves a ``ToolFunction``; it is converted into a failed ``Result``.
    """

    pass


class ToolValidationError(LLMToolError):
    """Raised when a tool definition or its parameter schema is invalid."""

    pass


class ConfigurationError(LLMToolError):
    """Raised when configuration values are missing or invalid."""

    pass


class ResultUnwrapError(LLMToolError):
    """Raised when ``unwrap`` is called on a failed result."""

    pass
