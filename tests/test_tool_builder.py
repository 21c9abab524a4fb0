import asyncio
import json
from typing import Annotated, Any, List, Optional

import pytest
from pydantic import BaseModel, Field

from agent_toolkit.llm_core import Err, Ok, Schema, ToolBuilder, ToolFunction, ToolValidationError, tool
from agent_toolkit.llm_core.tools import ArgumentExtractor, MalformedArguments, MissingField, ToolFailure
from agent_toolkit.llm_core.tools.models import ToolCallRequest, ToolCallResult


def _weather_schema():
    return (
        Schema.object("Weather parameters")
        .with_property("city", Schema.string("City name"))
        .with_property("unit", Schema.string("Unit", enum=["celsius", "fahrenheit"]), required=False)
    )


def _weather(extractor: ArgumentExtractor) -> Any:
    city = extractor.get_string("city")
    if city.is_err:
        return city
    unit = extractor.get_string("unit", default="celsius")
    if unit.is_err:
        return unit
    return Ok({"city": city.value, "unit": unit.value, "temp": 21})


def test_builder_builds_tool() -> None:
    weather = ToolBuilder("get_weather", "Current weather", _weather_schema()).with_handler(_weather).build()

    assert isinstance(weather, ToolFunction)
    assert weather.tool_schema.name == "get_weather"
    assert weather.tool_schema.parameters["required"] == ["city"]
    assert weather.timeout == 180.0


def test_builder_rejects_missing_parts_and_bad_names() -> None:
    with pytest.raises(ToolValidationError, match="missing handler"):
        ToolBuilder("get_weather", "Current weather", _weather_schema()).build()

    with pytest.raises(ToolValidationError, match="1-64 characters"):
        ToolBuilder("get weather", "Current weather", _weather_schema()).with_handler(_weather).build()

    with pytest.raises(ToolValidationError, match="non-empty description"):
        ToolBuilder("get_weather", "  ", _weather_schema()).with_handler(_weather).build()


def test_builder_chaining_and_timeout() -> None:
    built = (
        ToolBuilder()
        .with_name("w")
        .with_description("Weather")
        .with_schema(_weather_schema())
        .with_handler(_weather)
        .with_timeout(5)
        .build()
    )

    assert built.name == "w"
    assert built.timeout == 5


@pytest.mark.asyncio
async def test_invoke_decodes_json_arguments() -> None:
    weather = ToolBuilder("get_weather", "Current weather", _weather_schema()).with_handler(_weather).build()

    result = await weather.invoke('{"city": "Oslo"}')

    assert result == Ok({"city": "Oslo", "unit": "celsius", "temp": 21})


@pytest.mark.asyncio
async def test_invoke_reports_validation_and_decoding_errors() -> None:
    weather = ToolBuilder("get_weather", "Current weather", _weather_schema()).with_handler(_weather).build()

    assert await weather.invoke({}) == Err(MissingField("city"))

    malformed = await weather.invoke("[1, 2]")
    assert isinstance(malformed.error, MalformedArguments)

    assert isinstance((await weather.invoke(42)).error, MalformedArguments)


@pytest.mark.asyncio
async def test_invoke_turns_exceptions_and_timeouts_into_failures() -> None:
    def explode(extractor: ArgumentExtractor) -> Any:
        raise RuntimeError("kaboom")

    async def hang(extractor: ArgumentExtractor) -> Any:
        await asyncio.sleep(1)

    exploding = ToolBuilder("explode", "Raises", Schema.object()).with_handler(explode).build()
    hanging = ToolBuilder("hang", "Hangs", Schema.object()).with_handler(hang).with_timeout(0.01).build()

    failure = (await exploding.invoke({})).error
    assert isinstance(failure, ToolFailure)
    assert "RuntimeError: kaboom" in failure.message

    timeout = (await hanging.invoke({})).error
    assert isinstance(timeout, ToolFailure)
    assert "timed out" in timeout.message


@pytest.mark.asyncio
async def test_plain_return_values_count_as_success() -> None:
    plain = ToolBuilder("plain", "Plain value", Schema.object()).with_handler(lambda extractor: [1, 2]).build()

    assert await plain.invoke(None) == Ok([1, 2])


class Forecast(BaseModel):
    city: str
    days: List[int]


def test_from_function_infers_schema() -> None:
    def forecast(
        city: Annotated[str, Field(description="City name")],
        days: Annotated[int, Field(description="Number of days")] = 3,
        note: Annotated[Optional[str], Field(description="Free text")] = None,
    ) -> Forecast:
        """Multi-day forecast."""
        return Forecast(city=city, days=list(range(days)))

    built = ToolBuilder.from_function(forecast)

    assert built.name == "forecast"
    assert built.description == "Multi-day forecast."
    schema = built.parameter_schema
    assert schema.property_names == ["city", "days", "note"]
    assert schema.required_names == ["city"]
    assert schema.get_property("days").description == "Number of days"


@pytest.mark.asyncio
async def test_tool_decorator_calls_function_with_validated_arguments() -> None:
    @tool
    async def add(
        a: Annotated[int, Field(description="First term")], b: Annotated[int, Field(description="Second term")]
    ) -> int:
        """Adds two integers."""
        return a + b

    assert await add.invoke({"a": 2, "b": 3}) == Ok(5)
    assert isinstance((await add.invoke({"a": 2})).error, MissingField)


@pytest.mark.asyncio
async def test_from_function_serializes_models() -> None:
    @tool
    def forecast(city: Annotated[str, Field(description="City name")]) -> Forecast:
        """Forecast."""
        return Forecast(city=city, days=[1, 2])

    request = ToolCallRequest(name="forecast", arguments={"city": "Lima"}, call_id="c1")
    result = ToolCallResult.from_result(request, await forecast.invoke(request.arguments))

    assert json.loads(result.content) == {"result": {"city": "Lima", "days": [1, 2]}}


def test_from_function_requires_docstring_and_descriptions() -> None:
    def undocumented(x: Annotated[int, Field(description="x")]) -> int:
        return x

    def undescribed(x: int) -> int:
        """Has a docstring."""
        return x

    with pytest.raises(ToolValidationError, match="missing docstring"):
        ToolBuilder.from_function(undocumented)
    with pytest.raises(ToolValidationError):
        ToolBuilder.from_function(undescribed)


@pytest.mark.asyncio
async def test_timeouts_raised_by_the_handler_keep_their_own_message() -> None:
    async def slow_backend(extractor: ArgumentExtractor) -> Any:
        raise asyncio.TimeoutError("backend did not answer")

    def sync_backend(extractor: ArgumentExtractor) -> Any:
        raise asyncio.TimeoutError("sync backend did not answer")

    for handler, expected in [(slow_backend, "backend did not answer"), (sync_backend, "sync backend did not answer")]:
        built = ToolBuilder("backend", "Calls a backend", Schema.object()).with_handler(handler).with_timeout(5).build()

        failure = (await built.invoke({})).error

        assert isinstance(failure, ToolFailure)
        assert expected in failure.message
        assert "5 seconds" not in failure.message


@pytest.mark.asyncio
async def test_unserializable_output_becomes_a_failure() -> None:
    built = ToolBuilder("pairs", "Tuple keys", Schema.object()).with_handler(lambda extractor: Ok({(1, 2): "x"})).build()

    failure = (await built.invoke({})).error

    assert isinstance(failure, ToolFailure)
    assert failure.message.startswith("Tool 'pairs' failed: Tool output is not JSON-serializable")
