"""The orchestration loop that lets a model call tools until it can answer."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any, Awaitable, List, Optional, Sequence, TypeVar

from ..base import ModelClient
from ..logger import get_logger
from ..messages import SystemMessage, ToolMessage, UserMessage
from ..result import Err, Ok, Result
from ..tools import ToolRegistry
from ..tools.models import ToolCallRequest, ToolCallResult
from .errors import AgentError, ConversationError, RunCancelled, RunFailure
from .state import AgentOptions, AgentState, LoopPhase

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant with access to tools. "
    "Call a tool whenever it helps you answer accurately, and answer directly once you have what you need."
)


class _Cancelled(Exception):
    """Internal signal: the caller's cancel event fired while work was in flight."""


class Agent:
    """Drives a conversation between a model and a tool registry.

    One ``run`` is a strictly sequential series of turns. Each turn sends the
    conversation to the model; if the model asks for tools, they are
    dispatched (concurrently, results appended in the model's order) and the
    loop goes around again. The run ends when the model answers without tool
    calls, when ``max_turns`` model calls have been made, when the client
    fails, or when the caller cancels.

    The agent holds no per-run state, so one instance can serve concurrent runs.
    """

    def __init__(
        self,
        client: ModelClient,
        *,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        default_options: Optional[AgentOptions] = None,
    ) -> None:
        """
        Args:
            client: The model client used for every turn.
            system_prompt: Base system prompt; a run may append to it.
            default_options: Options used when ``run`` gets none.
        """
        self.client = client
        self.system_prompt = system_prompt
        self.default_options = default_options or AgentOptions()

    def initialize(self, query: str, options: Optional[AgentOptions] = None) -> AgentState:
        """Build the seed state: system prompt (plus addition) and the user query."""
        options = options or self.default_options
        prompt = self.system_prompt
        if options.system_prompt_addition:
            prompt = f"{prompt}\n\n{options.system_prompt_addition}" if prompt else options.system_prompt_addition
        seed = [UserMessage(content=query)]
        if prompt:
            seed.insert(0, SystemMessage(content=prompt))
        return AgentState().with_messages(*seed)

    async def run(
        self,
        query: str,
        registry: ToolRegistry,
        options: Optional[AgentOptions] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[AgentState, AgentError]:
        """Run the loop to a terminal state.

        Args:
            query: The user's request.
            registry: The tools the model may call.
            options: Per-run options, defaults to the agent's ``default_options``.
            cancel_event: When set, the run stops at the next opportunity,
                aborting the in-flight model call or tool batch.

        Returns:
            ``Ok(state)`` with status ``completed`` or ``turn-limit-exceeded``,
            or ``Err(AgentError)`` if the client failed, the conversation broke
            an invariant, or the run was cancelled.
        """
        options = options or self.default_options
        state = self.initialize(query, options)
        schemas = registry.list_schemas()
        logger.info(f"Starting agent run with {len(schemas)} tool(s), max_turns={options.max_turns}.")

        while True:
            turn_start = state

            if cancel_event is not None and cancel_event.is_set():
                return self._fail(turn_start, RunCancelled())

            if state.turn >= options.max_turns:
                logger.warning(f"Max turns ({options.max_turns}) reached. Stopping execution.")
                return Ok(state.with_phase(LoopPhase.TURN_LIMIT_EXCEEDED))

            pending = state.conversation.pending_tool_calls()
            if pending:
                ids = ", ".join(call.call_id for call in pending)
                return self._fail(state, ConversationError(f"Tool calls without results: {ids}."))

            logger.debug(f"Turn {state.turn + 1}/{options.max_turns}: phase={state.phase.value}")
            try:
                outcome = await self._until_cancelled(self.client.complete(state.conversation, schemas), cancel_event)
            except _Cancelled:
                return self._fail(turn_start, RunCancelled())

            state = state.next_turn()
            if isinstance(outcome, Err):
                logger.error(f"Model call failed on turn {state.turn}: {outcome.error}")
                return self._fail(state, outcome.error)

            message = outcome.value.to_message()
            state = state.with_messages(message)

            if not message.has_tool_calls:
                logger.info(f"Agent run completed after {state.turn} turn(s).")
                return Ok(state.with_phase(LoopPhase.COMPLETED))

            state = state.with_phase(LoopPhase.AWAITING_TOOL_RESULTS)
            logger.info(
                f"Turn {state.turn}/{options.max_turns}: Processing {len(message.tool_calls)} tool call(s): "
                f"{', '.join(call.name for call in message.tool_calls)}"
            )
            try:
                results = await self._until_cancelled(
                    self._execute_tool_calls(registry, message.tool_calls, options.max_concurrency),
                    cancel_event,
                )
            except _Cancelled:
                return self._fail(turn_start, RunCancelled())

            state = state.with_messages(*(ToolMessage.from_result(result) for result in results))
            state = state.with_phase(LoopPhase.PLANNING)

    async def _execute_tool_calls(
        self,
        registry: ToolRegistry,
        calls: Sequence[ToolCallRequest],
        max_concurrency: Optional[int],
    ) -> List[ToolCallResult]:
        """Dispatch all calls of one turn; results come back in call order."""
        semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

        async def run_one(call: ToolCallRequest) -> ToolCallResult:
            logger.debug(f"Handling tool call: {call.name} (ID: {call.call_id})")
            if semaphore is None:
                outcome = await registry.dispatch(call.name, call.arguments)
            else:
                async with semaphore:
                    outcome = await registry.dispatch(call.name, call.arguments)
            result = ToolCallResult.from_result(call, outcome)
            if result.is_error:
                logger.warning(f"Tool call '{call.name}' ({call.call_id}) failed: {result.response['error']}")
            return result

        return list(await asyncio.gather(*(run_one(call) for call in calls)))

    @staticmethod
    async def _until_cancelled(awaitable: Awaitable[T], cancel_event: Optional[asyncio.Event]) -> T:
        """Await ``awaitable`` unless ``cancel_event`` fires first.

        Raises:
            _Cancelled: If the event fired; the pending work has been cancelled.
        """
        if cancel_event is None:
            return await awaitable

        work: asyncio.Future[Any] = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except BaseException:
            work.cancel()
            raise
        finally:
            waiter.cancel()

        if work in done:
            return work.result()

        work.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await work
        raise _Cancelled()

    @staticmethod
    def _fail(state: AgentState, cause: RunFailure) -> Result[AgentState, AgentError]:
        failed = state.failed(cause)
        if isinstance(cause, RunCancelled):
            logger.info(f"Agent run cancelled after {failed.turn} turn(s).")
        return Err(AgentError(cause=cause, state=failed))
