import asyncio
import json
from typing import Any, List

import pytest

from agent_toolkit.llm_core import (
    Agent,
    AgentOptions,
    AgentStatus,
    ClientError,
    Err,
    LoopPhase,
    MessageRole,
    Ok,
    Schema,
    ToolBuilder,
    ToolMessage,
    ToolRegistry,
)
from agent_toolkit.llm_core.agent import AgentError, ConversationError, RunCancelled
from agent_toolkit.llm_core.tools import ArgumentExtractor
from helpers import ScriptedClient, SlowClient, call, turn


@pytest.mark.asyncio
async def test_run_without_tool_calls_completes_after_one_turn(registry: ToolRegistry) -> None:
    client = ScriptedClient([turn("Paris.")])
    agent = Agent(client)

    result = await agent.run("Capital of France?", registry)

    assert isinstance(result, Ok)
    state = result.value
    assert state.status is AgentStatus.COMPLETED
    assert state.phase is LoopPhase.COMPLETED
    assert state.turn == 1
    assert state.final_answer == "Paris."
    assert state.conversation.roles == [MessageRole.SYSTEM, MessageRole.USER, MessageRole.ASSISTANT]


@pytest.mark.asyncio
async def test_single_tool_call_then_answer(registry: ToolRegistry) -> None:
    client = ScriptedClient([turn("", call("echo", '{"text": "hi"}')), turn("It said hi.")])
    agent = Agent(client)

    result = await agent.run("Echo hi", registry)

    state = result.unwrap()
    assert state.status is AgentStatus.COMPLETED
    assert state.turn == 2
    assert state.conversation.roles == [
        MessageRole.SYSTEM,
        MessageRole.USER,
        MessageRole.ASSISTANT,
        MessageRole.TOOL,
        MessageRole.ASSISTANT,
    ]
    tool_message = state.conversation.messages[3]
    assert isinstance(tool_message, ToolMessage)
    assert tool_message.tool_call_id == "call_1"
    assert tool_message.name == "echo"
    assert not tool_message.is_error
    assert json.loads(tool_message.content) == {"result": "hi"}
    # The second model call saw the tool result
    assert len(client.conversations[1]) == 4


@pytest.mark.asyncio
async def test_turn_limit_exceeded_after_exactly_max_turns(registry: ToolRegistry) -> None:
    client = ScriptedClient([turn("", call("echo", {"text": "again"}))])
    agent = Agent(client)

    result = await agent.run("loop forever", registry, AgentOptions(max_turns=3))

    assert isinstance(result, Ok)
    state = result.value
    assert state.status is AgentStatus.TURN_LIMIT_EXCEEDED
    assert state.turn == 3
    assert len(client.conversations) == 3
    # Every tool call of the last turn still got its result
    assert state.conversation.pending_tool_calls() == []


@pytest.mark.asyncio
async def test_client_failure_on_first_call_keeps_only_seed_messages(registry: ToolRegistry) -> None:
    client = ScriptedClient([ClientError("rate limited")])
    agent = Agent(client)

    result = await agent.run("hello", registry)

    assert isinstance(result, Err)
    error = result.error
    assert error.cause == ClientError("rate limited")
    assert error.state.status is AgentStatus.FAILED
    assert error.state.error == ClientError("rate limited")
    assert error.state.conversation.roles == [MessageRole.SYSTEM, MessageRole.USER]
    assert "rate limited" in str(error)


@pytest.mark.asyncio
async def test_client_failure_after_tool_turn_keeps_previous_turns(registry: ToolRegistry) -> None:
    client = ScriptedClient([turn("", call("echo", {"text": "x"})), ClientError("boom")])

    result = await Agent(client).run("go", registry)

    assert isinstance(result, Err)
    assert result.error.state.turn == 2
    assert result.error.state.conversation.roles[-1] is MessageRole.TOOL


@pytest.mark.asyncio
async def test_unknown_tool_becomes_error_result_and_run_continues(registry: ToolRegistry) -> None:
    client = ScriptedClient([turn("", call("missing", {})), turn("Sorry, no such tool.")])

    state = (await Agent(client).run("use missing", registry)).unwrap()

    assert state.status is AgentStatus.COMPLETED
    tool_message = state.conversation.messages[3]
    assert tool_message.is_error
    payload = json.loads(tool_message.content)
    assert "missing" in payload["error"]
    assert "echo" in payload["error"]


@pytest.mark.asyncio
async def test_handler_failure_and_bad_arguments_are_reported_to_the_model(registry: ToolRegistry) -> None:
    client = ScriptedClient(
        [
            turn("", call("flaky", {}, "a"), call("echo", "{not json", "b"), call("echo", {"text": 3}, "c")),
            turn("done"),
        ]
    )

    state = (await Agent(client).run("try", registry)).unwrap()

    results = [m for m in state.conversation.messages if isinstance(m, ToolMessage)]
    assert [m.tool_call_id for m in results] == ["a", "b", "c"]
    assert all(m.is_error for m in results)
    assert "backend unavailable" in json.loads(results[0].content)["error"]
    assert "Failed to parse tool arguments" in json.loads(results[1].content)["error"]
    assert "expected string but got integer" in json.loads(results[2].content)["error"]


@pytest.mark.asyncio
async def test_tool_results_keep_call_order_under_concurrency() -> None:
    finished: List[str] = []

    async def slow(extractor: ArgumentExtractor) -> Any:
        delay = extractor.get_number("delay").unwrap()
        await asyncio.sleep(delay)
        finished.append(str(delay))
        return delay

    schema = Schema.object().with_property("delay", Schema.number("Seconds to sleep"))
    registry = ToolRegistry([ToolBuilder("sleep", "Sleeps", schema).with_handler(slow).build()])
    client = ScriptedClient(
        [
            turn("", call("sleep", {"delay": 0.05}, "first"), call("sleep", {"delay": 0.0}, "second")),
            turn("done"),
        ]
    )

    state = (await Agent(client).run("sleep", registry)).unwrap()

    results = [m for m in state.conversation.messages if isinstance(m, ToolMessage)]
    assert [m.tool_call_id for m in results] == ["first", "second"]
    # They really ran concurrently: the short one finished first
    assert finished == ["0.0", "0.05"]


@pytest.mark.asyncio
async def test_max_concurrency_bounds_parallel_tool_calls() -> None:
    running = 0
    peak = 0

    async def track(extractor: ArgumentExtractor) -> Any:
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return "ok"

    registry = ToolRegistry([ToolBuilder("work", "Does work", Schema.object()).with_handler(track).build()])
    calls = [call("work", {}, f"c{i}") for i in range(5)]
    client = ScriptedClient([turn("", *calls), turn("done")])

    result = await Agent(client).run("work", registry, AgentOptions(max_concurrency=2))

    assert result.is_ok
    assert peak == 2


@pytest.mark.asyncio
async def test_system_prompt_addition_is_appended(registry: ToolRegistry) -> None:
    client = ScriptedClient([turn("ok")])
    agent = Agent(client, system_prompt="Base prompt.")

    state = (await agent.run("hi", registry, AgentOptions(system_prompt_addition="Be brief."))).unwrap()

    assert state.conversation.messages[0].content == "Base prompt.\n\nBe brief."
    assert [t.name for t in client.tools_seen[0]] == ["echo", "flaky"]


@pytest.mark.asyncio
async def test_cancel_before_first_turn(registry: ToolRegistry) -> None:
    client = ScriptedClient([turn("never")])
    cancel = asyncio.Event()
    cancel.set()

    result = await Agent(client).run("hi", registry, cancel_event=cancel)

    assert isinstance(result, Err)
    assert isinstance(result.error.cause, RunCancelled)
    assert result.error.state.status is AgentStatus.FAILED
    assert client.conversations == []


@pytest.mark.asyncio
async def test_cancel_during_tool_batch_discards_unfinished_turn() -> None:
    started = asyncio.Event()

    async def block(extractor: ArgumentExtractor) -> Any:
        started.set()
        await asyncio.sleep(10)
        return "too late"

    registry = ToolRegistry([ToolBuilder("block", "Blocks", Schema.object()).with_handler(block).build()])
    client = ScriptedClient([turn("", call("block", {})), turn("never")])
    cancel = asyncio.Event()

    async def cancel_when_started() -> None:
        await started.wait()
        cancel.set()

    run = asyncio.create_task(Agent(client).run("block", registry, cancel_event=cancel))
    await cancel_when_started()
    result = await asyncio.wait_for(run, timeout=2)

    assert isinstance(result, Err)
    assert isinstance(result.error.cause, RunCancelled)
    state = result.error.state
    # The assistant message of the unfinished turn is not kept
    assert state.conversation.roles == [MessageRole.SYSTEM, MessageRole.USER]
    assert len(client.conversations) == 1


@pytest.mark.asyncio
async def test_pending_tool_calls_in_seed_conversation_fail_the_run(registry: ToolRegistry) -> None:
    class DanglingAgent(Agent):
        def initialize(self, query, options=None):  # type: ignore[no-untyped-def]
            state = super().initialize(query, options)
            return state.with_messages(turn("", call("echo", {"text": "x"}, "orphan")).to_message())

    client = ScriptedClient([turn("never")])

    result = await DanglingAgent(client).run("hi", registry)

    assert isinstance(result, Err)
    assert isinstance(result.error.cause, ConversationError)
    assert "orphan" in result.error.message
    assert client.conversations == []


def test_agent_options_validation() -> None:
    with pytest.raises(ValueError):
        AgentOptions(max_turns=0)
    with pytest.raises(ValueError):
        AgentOptions(max_concurrency=0)
    assert AgentOptions().max_turns == 10


@pytest.mark.asyncio
async def test_unserializable_tool_output_is_reported_and_run_continues() -> None:
    def tuple_keys(extractor: ArgumentExtractor) -> Any:
        return {("a", "b"): 1}

    def self_referencing(extractor: ArgumentExtractor) -> Any:
        loop: dict = {"name": "loop"}
        loop["self"] = loop
        return loop

    registry = ToolRegistry(
        [
            ToolBuilder("pairs", "Returns tuple keys", Schema.object()).with_handler(tuple_keys).build(),
            ToolBuilder("loop", "Returns a cycle", Schema.object()).with_handler(self_referencing).build(),
        ]
    )
    client = ScriptedClient([turn("", call("pairs", {}, "a"), call("loop", {}, "b")), turn("done")])

    result = await Agent(client).run("go", registry)

    state = result.unwrap()
    assert state.status is AgentStatus.COMPLETED
    assert state.final_answer == "done"
    results = [m for m in state.conversation.messages if isinstance(m, ToolMessage)]
    assert [m.tool_call_id for m in results] == ["a", "b"]
    assert all(m.is_error for m in results)
    for message in results:
        assert "not JSON-serializable" in json.loads(message.content)["error"]


@pytest.mark.asyncio
async def test_cancel_during_model_call_keeps_only_seed_messages(registry: ToolRegistry) -> None:
    client = SlowClient()
    cancel = asyncio.Event()

    run = asyncio.create_task(Agent(client).run("hi", registry, cancel_event=cancel))
    await client.started.wait()
    cancel.set()
    result = await asyncio.wait_for(run, timeout=2)

    assert isinstance(result, Err)
    assert isinstance(result.error, AgentError)
    assert isinstance(result.error.cause, RunCancelled)
    state = result.error.state
    assert state.status is AgentStatus.FAILED
    assert state.turn == 0
    assert state.conversation.roles == [MessageRole.SYSTEM, MessageRole.USER]


@pytest.mark.asyncio
async def test_client_timeout_fails_the_run(registry: ToolRegistry) -> None:
    client = SlowClient(delay=1.0, request_timeout=0.01)

    result = await Agent(client).run("hi", registry)

    assert isinstance(result, Err)
    assert isinstance(result.error.cause, ClientError)
    assert "timed out" in result.error.cause.message
    state = result.error.state
    assert state.status is AgentStatus.FAILED
    assert state.conversation.roles == [MessageRole.SYSTEM, MessageRole.USER]


def test_agent_settings_are_keyword_only() -> None:
    client = ScriptedClient([turn("never")])

    with pytest.raises(TypeError):
        Agent(client, "positional prompt")  # type: ignore[misc]

    agent = Agent(client, system_prompt="Base.", default_options=AgentOptions(max_turns=2))
    assert agent.default_options.max_turns == 2
