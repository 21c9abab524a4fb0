import asyncio
from typing import Any, List, Optional, Sequence, Union

from agent_toolkit.llm_core import AssistantTurn, ClientError, Conversation, ModelClient, Ok, Err, ToolCallRequest
from agent_toolkit.llm_core.tools import ToolSchema


class ScriptedClient(ModelClient):
    """Replays a fixed list of turns and records every conversation it was sent.

    The last entry of the script repeats forever.
    """

    def __init__(self, script: Sequence[Union[AssistantTurn, ClientError]]) -> None:
        super().__init__(max_retries=0, base_retry_delay=0.0)
        self.script = list(script)
        self.conversations: List[Conversation] = []
        self.tools_seen: List[List[ToolSchema]] = []

    async def complete(self, conversation: Conversation, tools: Sequence[ToolSchema]) -> Any:
        self.conversations.append(conversation)
        self.tools_seen.append(list(tools))
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(step, ClientError):
            return Err(step)
        return Ok(step)

    async def _complete_impl(self, conversation: Conversation, tools: List[ToolSchema]) -> AssistantTurn:
        raise NotImplementedError


def call(name: str, arguments: Any = None, call_id: str = "call_1") -> ToolCallRequest:
    return ToolCallRequest(name=name, arguments=arguments if arguments is not None else {}, call_id=call_id)


def turn(content: str = "", *calls: ToolCallRequest) -> AssistantTurn:
    return AssistantTurn(content=content, tool_calls=tuple(calls))


class SlowClient(ModelClient):
    """A client whose model call takes ``delay`` seconds; ``started`` is set once it begins."""

    def __init__(self, delay: float = 10.0, request_timeout: Optional[float] = None) -> None:
        super().__init__(max_retries=0, base_retry_delay=0.0, request_timeout=request_timeout)
        self.delay = delay
        self.started = asyncio.Event()

    async def _complete_impl(self, conversation: Conversation, tools: List[ToolSchema]) -> AssistantTurn:
        self.started.set()
        await asyncio.sleep(self.delay)
        return AssistantTurn(content="too late")
