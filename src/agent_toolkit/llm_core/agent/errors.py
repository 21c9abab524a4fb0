"""Failures that end an agent run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..base import ClientError
from .state import AgentState


@dataclass(frozen=True)
class ConversationError:
    """The conversation broke an invariant, e.g. a tool call without a result."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class RunCancelled:
    """The caller signalled cancellation."""

    message: str = "Run was cancelled."

    def __str__(self) -> str:
        return self.message


RunFailure = Union[ClientError, ConversationError, RunCancelled]


@dataclass(frozen=True)
class AgentError:
    """The single top-level error of a failed run.

    Attributes:
        cause: What went wrong. Client errors are passed through untouched.
        state: The state at the time of failure, with status ``failed``.
    """

    cause: RunFailure
    state: AgentState

    @property
    def message(self) -> str:
        return str(self.cause)

    def __str__(self) -> str:
        return f"Agent run failed after {self.state.turn} turn(s): {self.cause}"
