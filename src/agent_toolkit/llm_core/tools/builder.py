"""Assemble ``ToolFunction`` instances.

Tools are either described explicitly::

    weather = (
        ToolBuilder("get_weather", "Current weather for a city", schema)
        .with_handler(fetch_weather)
        .build()
    )

or inferred from an annotated function::

    @tool
    def add(a: Annotated[int, Field(description="First term")], b: Annotated[int, Field(description="Second term")]) -> int:
        \"\"\"Adds two integers.\"\"\"
        return a + b
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, Optional, cast

from pydantic import ValidationError, create_model

from ..exceptions import ToolValidationError
from ..logger import get_logger
from ..result import Err
from .models import ToolFunction
from .models.models import TOOL_NAME_PATTERN, Handler
from .schema import ArgumentExtractor, ObjectSchema, Schema, ToolParameterFactory

logger = get_logger(__name__)

_UNSET = object()


class ToolBuilder:
    """Collects the parts of a tool and validates them on ``build()``.

    Every ``with_*`` method returns the builder so calls can be chained.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        schema: Optional[ObjectSchema] = None,
    ) -> None:
        self._name = name
        self._description = description
        self._schema = schema
        self._handler: Optional[Handler] = None
        self._timeout: Any = _UNSET

    def with_name(self, name: str) -> "ToolBuilder":
        self._name = name
        return self

    def with_description(self, description: str) -> "ToolBuilder":
        self._description = description
        return self

    def with_schema(self, schema: ObjectSchema) -> "ToolBuilder":
        self._schema = schema
        return self

    def with_handler(self, handler: Handler) -> "ToolBuilder":
        self._handler = handler
        return self

    def with_timeout(self, timeout: Optional[float]) -> "ToolBuilder":
        self._timeout = timeout
        return self

    def build(self) -> ToolFunction:
        """Create the tool.

        Raises:
            ToolValidationError: If a part is missing or invalid.
        """
        missing = [
            part
            for part, value in (
                ("name", self._name),
                ("description", self._description),
                ("schema", self._schema),
                ("handler", self._handler),
            )
            if value is None
        ]
        if missing:
            msg = f"Cannot build tool '{self._name or '<unnamed>'}': missing {', '.join(missing)}."
            logger.error(msg)
            raise ToolValidationError(msg)

        name = cast(str, self._name)
        if not TOOL_NAME_PATTERN.match(name):
            msg = f"Tool name '{name}' must be 1-64 characters of letters, digits, '_' or '-'."
            logger.error(msg)
            raise ToolValidationError(msg)
        if not cast(str, self._description).strip():
            msg = f"Tool '{name}' needs a non-empty description. LLMs need a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        if not isinstance(self._schema, ObjectSchema):
            msg = f"Tool '{name}' parameters must be an object schema."
            logger.error(msg)
            raise ToolValidationError(msg)
        if not callable(self._handler):
            msg = f"Handler of tool '{name}' is not callable."
            logger.error(msg)
            raise ToolValidationError(msg)

        kwargs: Dict[str, Any] = {}
        if self._timeout is not _UNSET:
            kwargs["timeout"] = self._timeout
        try:
            return ToolFunction(
                name=name,
                description=cast(str, self._description),
                parameter_schema=self._schema,
                handler=self._handler,
                **kwargs,
            )
        except ValidationError as exc:
            raise ToolValidationError(f"Invalid tool '{name}': {exc}") from exc

    @classmethod
    def from_function(
        cls,
        func: Callable[..., Any],
        name: Optional[str] = None,
        description: Optional[str] = None,
        timeout: Any = _UNSET,
    ) -> ToolFunction:
        """Generate a tool from an annotated function.

        Every parameter must be annotated as ``Annotated[T, Field(description=...)]``;
        the docstring becomes the description unless one is given.

        Args:
            func: The function implementing the tool, sync or async.
            name: Optional name override for the tool.
            description: Optional description override for the tool.
            timeout: Optional timeout override in seconds.

        Returns:
            The tool wrapping ``func``.

        Raises:
            ToolValidationError: If the function is missing a docstring or parameter descriptions.
        """
        tool_name = name or func.__name__
        if description is None:
            description = cls._get_docstring_from_func(func, tool_name)

        fields = ToolParameterFactory.build_fields(func, tool_name)
        args_model = create_model(f"{tool_name}Params", **cast(Dict[str, Any], fields))
        schema = Schema.from_json_schema(args_model.model_json_schema())
        param_names = list(fields)

        def bind(extractor: ArgumentExtractor) -> Any:
            checked = extractor.validate()
            if isinstance(checked, Err):
                return checked
            try:
                validated = args_model.model_validate(dict(extractor.arguments))
            except ValidationError as exc:
                return Err(f"Argument validation failed: {exc}")
            return {param: getattr(validated, param) for param in param_names}

        if inspect.iscoroutinefunction(func):

            async def handler(extractor: ArgumentExtractor) -> Any:
                bound = bind(extractor)
                if isinstance(bound, Err):
                    return bound
                return await func(**bound)

        else:

            def handler(extractor: ArgumentExtractor) -> Any:
                bound = bind(extractor)
                if isinstance(bound, Err):
                    return bound
                return func(**bound)

        builder = cls(tool_name, description, schema).with_handler(handler)
        if timeout is not _UNSET:
            builder = builder.with_timeout(timeout)
        return builder.build()

    @staticmethod
    def _get_docstring_from_func(func: Callable[..., Any], tool_name: str) -> str:
        doc = inspect.getdoc(func)
        if not doc:
            msg = f"Tool '{tool_name}' missing docstring. LLMs need a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        return doc


def tool(func: Callable[..., Any]) -> ToolFunction:
    """A decorator to turn a function into a tool.

    Args:
        func: The function to decorate.

    Returns:
        The ``ToolFunction`` wrapping ``func``.
    """
    return ToolBuilder.from_function(func)
