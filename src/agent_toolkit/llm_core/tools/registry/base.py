"""The lookup table from tool name to tool, and dispatch by name."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from ...exceptions import ToolNotFoundError, ToolRegistrationError
from ...logger import get_logger
from ...result import Err, Ok, Result
from ..errors import ToolCallError, UnknownTool
from ..models import ToolFunction, ToolSchema

logger = get_logger(__name__)


class ToolRegistry:
    """
    A central registry of the tools available to one agent.

    The registry is built once from a sequence of tools and is read-only
    afterwards, so it can be shared between concurrent runs. Registration
    order is kept and is the order in which tools are advertised to the model.

    Duplicate names are rejected: registering two tools with the same name
    raises ``ToolRegistrationError``.
    """

    def __init__(self, tools: Sequence[ToolFunction] = ()) -> None:
        """Initialize the ToolRegistry.

        Args:
            tools: The tools to register, in advertising order.

        Raises:
            ToolRegistrationError: If an entry is not a ``ToolFunction`` or a name is used twice.
        """
        registered: Dict[str, ToolFunction] = {}
        for tool in tools:
            if not isinstance(tool, ToolFunction):
                msg = f"Expected a ToolFunction, got {type(tool).__name__}."
                logger.error(msg)
                raise ToolRegistrationError(msg)
            if tool.name in registered:
                msg = f"Tool '{tool.name}' is already registered."
                logger.error(msg)
                raise ToolRegistrationError(msg)
            registered[tool.name] = tool
            logger.debug(f"Registered tool: '{tool.name}'")

        self._tools: Mapping[str, ToolFunction] = MappingProxyType(registered)
        logger.info(f"Tool registry ready with {len(registered)} tool(s): {', '.join(registered) or 'none'}")

    @property
    def tools(self) -> Mapping[str, ToolFunction]:
        """Read-only mapping of name to tool."""
        return self._tools

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolFunction]:
        return iter(self._tools.values())

    def __getitem__(self, name: str) -> ToolFunction:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(f"Tool '{name}' not found in the registry.") from None

    def get(self, name: str) -> Optional[ToolFunction]:
        return self._tools.get(name)

    def resolve(self, name: str) -> Result[ToolFunction, UnknownTool]:
        """Look a tool up by name.

        Returns:
            ``Ok(tool)`` or ``Err(UnknownTool)`` listing the available names.
        """
        tool = self._tools.get(name)
        if tool is None:
            return Err(UnknownTool(name=name, available=tuple(self._tools)))
        return Ok(tool)

    async def dispatch(self, name: str, raw_arguments: Any) -> Result[Any, ToolCallError]:
        """Resolve ``name`` and invoke the tool with the raw arguments.

        Never raises: an unknown name, invalid arguments and handler failures
        all come back as ``Err``.
        """
        resolved = self.resolve(name)
        if isinstance(resolved, Err):
            logger.warning(resolved.error.message)
            return resolved
        return await resolved.value.invoke(raw_arguments)

    def list_schemas(self) -> List[ToolSchema]:
        """The tools as advertised to the model, in registration order."""
        return [tool.tool_schema for tool in self._tools.values()]
