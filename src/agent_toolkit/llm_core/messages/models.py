"""Provider-agnostic message models and the conversation they form."""

from __future__ import annotations

from abc import ABC
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..tools.models import ToolCallRequest, ToolCallResult


class MessageRole(str, Enum):
    """Who authored a message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class BaseMessage(ABC, BaseModel):
    """Base model for messages exchanged with an LLM.

    Attributes:
        role: Role associated with the message.
        content: Text payload of the message.
    """

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str


class SystemMessage(BaseMessage):
    """Message authored by the system to steer behavior."""

    role: MessageRole = MessageRole.SYSTEM


class UserMessage(BaseMessage):
    """Message authored by an end user."""

    role: MessageRole = MessageRole.USER


class AssistantMessage(BaseMessage):
    """Message authored by the assistant, optionally containing tool calls."""

    role: MessageRole = MessageRole.ASSISTANT
    content: str = ""
    tool_calls: Tuple[ToolCallRequest, ...] = ()

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


class ToolMessage(BaseMessage):
    """Message carrying the outcome of one tool call."""

    role: MessageRole = MessageRole.TOOL
    tool_call_id: str
    name: str
    is_error: bool = False

    @classmethod
    def from_result(cls, result: ToolCallResult) -> "ToolMessage":
        return cls(content=result.content, tool_call_id=result.call_id, name=result.name, is_error=result.is_error)


class Conversation(BaseModel):
    """An ordered, append-only sequence of messages.

    ``append`` returns a new conversation; an existing one never changes, so a
    snapshot taken before a turn stays valid whatever happens during the turn.
    """

    model_config = ConfigDict(frozen=True)

    messages: Tuple[BaseMessage, ...] = Field(default_factory=tuple)

    def append(self, *messages: BaseMessage) -> "Conversation":
        return Conversation(messages=self.messages + tuple(messages))

    def __len__(self) -> int:
        return len(self.messages)

    @property
    def roles(self) -> List[MessageRole]:
        return [message.role for message in self.messages]

    @property
    def last_assistant_message(self) -> Optional[AssistantMessage]:
        for message in reversed(self.messages):
            if isinstance(message, AssistantMessage):
                return message
        return None

    def pending_tool_calls(self) -> List[ToolCallRequest]:
        """Tool calls requested by the assistant that have no result message yet."""
        pending: Dict[str, ToolCallRequest] = {}
        for message in self.messages:
            if isinstance(message, AssistantMessage):
                for call in message.tool_calls:
                    pending[call.call_id] = call
            elif isinstance(message, ToolMessage):
                pending.pop(message.tool_call_id, None)
        return list(pending.values())
