"""The tool definition: identity, description, parameter schema and handler."""

from __future__ import annotations

import asyncio
import inspect
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from ...exceptions import ToolExecutionError
from ...logger import get_logger
from ...result import Err, Ok, Result
from ..errors import SchemaValidationError, ToolCallError, ToolFailure
from ..schema import ArgumentExtractor, ObjectSchema
from .tool_call import normalize_arguments, to_json

logger = get_logger(__name__)

TOOL_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

Handler = Callable[[ArgumentExtractor], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class ToolSchema:
    """What the model gets to see of a tool."""

    name: str
    description: str
    parameters: Dict[str, Any]


class ToolFunction(BaseModel):
    """
    A callable operation the model may invoke.

    Attributes:
        name: The unique name of the tool.
        description: What the tool does; the model reads this to decide when to call it.
        parameter_schema: Object schema the arguments must conform to.
        handler: Receives an ``ArgumentExtractor`` and returns a ``Result``, a plain
            value (treated as success) or an awaitable of either.
        timeout: Seconds a single invocation may take. ``None`` disables the limit.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    description: str
    parameter_schema: ObjectSchema
    handler: Callable[..., Any]
    timeout: Optional[float] = 180.0

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not TOOL_NAME_PATTERN.match(value):
            raise ValueError(f"Tool name '{value}' must be 1-64 characters of letters, digits, '_' or '-'.")
        return value

    @property
    def tool_schema(self) -> ToolSchema:
        return ToolSchema(self.name, self.description, self.parameter_schema.to_json_schema())

    async def invoke(self, raw_arguments: Any) -> Result[Any, ToolCallError]:
        """Validate the raw arguments and run the handler.

        Never raises for handler failures: exceptions and timeouts are turned
        into ``ToolFailure``. Task cancellation still propagates.

        Args:
            raw_arguments: Arguments as emitted by the model.

        Returns:
            ``Ok(output)`` or ``Err`` with the validation or execution error.
        """
        arguments = normalize_arguments(raw_arguments)
        if isinstance(arguments, Err):
            logger.warning(f"Argument normalization failed for '{self.name}': {arguments.error.message}")
            return arguments

        extractor = ArgumentExtractor(self.parameter_schema, arguments.value)
        try:
            outcome = await self._execute(extractor)
        except ToolExecutionError as exc:
            logger.warning(f"Tool '{self.name}' failed: {exc}")
            return Err(ToolFailure(self.name, str(exc)))
        except Exception as exc:
            logger.warning(f"Unhandled error in tool '{self.name}': {exc} ({type(exc).__name__})", exc_info=True)
            return Err(ToolFailure(self.name, f"{type(exc).__name__}: {exc}"))

        return self._as_result(outcome)

    async def _execute(self, extractor: ArgumentExtractor) -> Any:
        """Run the handler under the tool's time limit.

        Raises:
            ToolExecutionError: If execution exceeds ``timeout``.
        """
        try:
            outcome = await asyncio.wait_for(self._call_handler(extractor), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            msg = f"Tool execution timed out after {self.timeout} seconds."
            raise ToolExecutionError(msg) from exc

        if isinstance(outcome, _HandlerTimeout):
            raise outcome.error
        return outcome

    async def _call_handler(self, extractor: ArgumentExtractor) -> Any:
        try:
            if inspect.iscoroutinefunction(self.handler):
                return await self.handler(extractor)

            outcome = await asyncio.to_thread(self.handler, extractor)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return outcome
        except asyncio.TimeoutError as exc:
            # Raised by the handler's own downstream call, not by ``self.timeout``
            return _HandlerTimeout(exc)

    def _as_result(self, outcome: Any) -> Result[Any, ToolCallError]:
        if isinstance(outcome, Err):
            error = outcome.error
            if isinstance(error, (SchemaValidationError, ToolFailure)):
                return Err(error)
            return Err(ToolFailure(self.name, str(error)))

        value = outcome.value if isinstance(outcome, Ok) else outcome
        try:
            to_json(value)
        except (TypeError, ValueError) as exc:
            logger.warning(f"Tool '{self.name}' returned an output that cannot be serialized: {exc}")
            return Err(ToolFailure(self.name, f"Tool output is not JSON-serializable: {exc}"))
        return Ok(value)


@dataclass(frozen=True)
class _HandlerTimeout:
    error: BaseException
