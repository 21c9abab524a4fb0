from typing import Any

import pytest

from agent_toolkit.llm_core import Err, Ok, Schema, ToolBuilder, ToolFunction, ToolRegistry
from agent_toolkit.llm_core.tools import ArgumentExtractor


@pytest.fixture
def echo_tool() -> ToolFunction:
    schema = Schema.object("Echo parameters").with_property("text", Schema.string("Text to echo"))

    def handler(extractor: ArgumentExtractor) -> Any:
        text = extractor.get_string("text")
        if text.is_err:
            return text
        return Ok(text.value)

    return ToolBuilder("echo", "Echoes the given text", schema).with_handler(handler).build()


@pytest.fixture
def failing_tool() -> ToolFunction:
    def handler(extractor: ArgumentExtractor) -> Any:
        return Err("backend unavailable")

    return ToolBuilder("flaky", "Always fails", Schema.object()).with_handler(handler).build()


@pytest.fixture
def registry(echo_tool: ToolFunction, failing_tool: ToolFunction) -> ToolRegistry:
    return ToolRegistry([echo_tool, failing_tool])
