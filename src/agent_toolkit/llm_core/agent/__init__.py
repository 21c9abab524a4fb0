"""The agent orchestration loop and its state."""

from .agent import Agent, DEFAULT_SYSTEM_PROMPT
from .state import AgentOptions, AgentState, AgentStatus, LoopPhase
from .errors import AgentError, ConversationError, RunCancelled, RunFailure

__all__ = [
    "Agent",
    "DEFAULT_SYSTEM_PROMPT",
    "AgentOptions",
    "AgentState",
    "AgentStatus",
    "LoopPhase",
    "AgentError",
    "ConversationError",
    "RunCancelled",
    "RunFailure",
]
