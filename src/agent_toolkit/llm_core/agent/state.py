"""State carried through one agent run."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..messages import BaseMessage, Conversation


class AgentStatus(str, Enum):
    """Coarse outcome of a run."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    TURN_LIMIT_EXCEEDED = "turn-limit-exceeded"


class LoopPhase(str, Enum):
    """Where the orchestration loop currently is."""

    PLANNING = "planning"
    AWAITING_TOOL_RESULTS = "awaiting-tool-results"
    COMPLETED = "completed"
    FAILED = "failed"
    TURN_LIMIT_EXCEEDED = "turn-limit-exceeded"


_TERMINAL_PHASES = {
    LoopPhase.COMPLETED: AgentStatus.COMPLETED,
    LoopPhase.FAILED: AgentStatus.FAILED,
    LoopPhase.TURN_LIMIT_EXCEEDED: AgentStatus.TURN_LIMIT_EXCEEDED,
}


class AgentOptions(BaseModel):
    """
    Per-run settings.

    Attributes:
        system_prompt_addition: Text appended to the agent's system prompt for this run.
        max_turns: Maximum number of model calls before the run stops with
            ``turn-limit-exceeded``. Must be at least 1.
        max_concurrency: Maximum number of tool calls of one turn executed at
            the same time. ``None`` runs them all at once.
    """

    system_prompt_addition: Optional[str] = None
    max_turns: int = Field(default=10, ge=1)
    max_concurrency: Optional[int] = Field(default=None, ge=1)


@dataclass(frozen=True)
class AgentState:
    """Conversation plus loop metadata. Owned by exactly one run.

    Attributes:
        conversation: Everything exchanged so far.
        turn: Number of model calls made.
        status: Coarse outcome, ``running`` until a terminal phase is reached.
        phase: Current loop phase.
        error: The failure that ended the run, if it failed.
    """

    conversation: Conversation = field(default_factory=Conversation)
    turn: int = 0
    status: AgentStatus = AgentStatus.RUNNING
    phase: LoopPhase = LoopPhase.PLANNING
    error: Optional[Any] = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not AgentStatus.RUNNING

    @property
    def final_answer(self) -> Optional[str]:
        """Content of the last assistant message, if any."""
        message = self.conversation.last_assistant_message
        return message.content if message is not None else None

    def with_messages(self, *messages: BaseMessage) -> AgentState:
        return replace(self, conversation=self.conversation.append(*messages))

    def with_phase(self, phase: LoopPhase) -> AgentState:
        return replace(self, phase=phase, status=_TERMINAL_PHASES.get(phase, AgentStatus.RUNNING))

    def next_turn(self) -> AgentState:
        return replace(self, turn=self.turn + 1)

    def failed(self, error: Any) -> AgentState:
        return replace(self.with_phase(LoopPhase.FAILED), error=error)
