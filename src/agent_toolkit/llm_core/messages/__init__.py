"""Expose provider-agnostic message model types and the conversation container."""

from .models import (
    MessageRole,
    BaseMessage,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    ToolMessage,
    Conversation,
)

__all__ = [
    "MessageRole",
    "BaseMessage",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "ToolMessage",
    "Conversation",
]
