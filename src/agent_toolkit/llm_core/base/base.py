"""Core abstractions for model provider clients."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, List, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict

from ..logger import get_logger
from ..messages import AssistantMessage, Conversation
from ..result import Err, Ok, Result
from ..tools.models import ToolCallRequest, ToolSchema

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ClientError:
    """A model call failed (network, auth, rate limit, timeout, bad response).

    Attributes:
        message: Human readable description.
        cause: The exception raised by the provider SDK, if any.
    """

    message: str
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        return self.message


class AssistantTurn(BaseModel):
    """Normalized output of one model call.

    Attributes:
        content: Text content returned by the provider.
        tool_calls: Tool calls requested by the model, in emission order.
        raw: Provider-specific response payload for advanced use cases.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    content: str = ""
    tool_calls: Tuple[ToolCallRequest, ...] = ()
    raw: Any = None

    def to_message(self) -> AssistantMessage:
        return AssistantMessage(content=self.content, tool_calls=self.tool_calls)


class ModelClient(ABC):
    """Abstract base class for model provider clients.

    Subclasses implement ``_complete_impl``. ``complete`` adds bounded
    retries with exponential backoff and an optional per-attempt timeout,
    and converts every failure into ``Err(ClientError)`` so callers never
    have to catch provider exceptions.
    """

    def __init__(self, max_retries: int = 3, base_retry_delay: float = 1.0, request_timeout: Optional[float] = None):
        self.max_retries = max_retries
        self.base_retry_delay = base_retry_delay
        self.request_timeout = request_timeout

    async def complete(self, conversation: Conversation, tools: Sequence[ToolSchema]) -> Result[AssistantTurn, ClientError]:
        """
        Ask the model for the next assistant turn.

        Args:
            conversation: The conversation so far.
            tools: The tools the model may call.

        Returns:
            ``Ok(AssistantTurn)`` or ``Err(ClientError)``.
        """
        try:
            turn = await self._execute_with_retry(self._complete_impl, conversation, list(tools))
        except asyncio.TimeoutError as exc:
            msg = f"Model request timed out after {self.request_timeout} seconds."
            logger.error(msg)
            return Err(ClientError(msg, cause=exc))
        except Exception as exc:
            msg = f"Model request failed: {type(exc).__name__}: {exc}"
            logger.error(msg)
            return Err(ClientError(msg, cause=exc))
        return Ok(turn)

    async def _execute_with_retry(
        self,
        func: Callable[..., Coroutine[Any, Any, T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Executes a function with retry logic.

        Args:
            func: The asynchronous function to execute.
            *args: Positional arguments for the function.
            **kwargs: Keyword arguments for the function.

        Returns:
            The result of the function call.

        Raises:
            Exception: The last encountered exception if all retries fail or
                the error is not retryable.
        """
        delay = self.base_retry_delay
        attempt = 0
        while True:
            try:
                return await asyncio.wait_for(func(*args, **kwargs), timeout=self.request_timeout)
            except Exception as e:
                if attempt >= self.max_retries or not self._is_retryable(e):
                    raise

                attempt += 1
                logger.warning(f"API Error (Retry: {attempt}/{self.max_retries}): {e}. Waiting {delay}s...")
                await asyncio.sleep(delay)
                delay *= 2  # Exponential backoff

    def _is_retryable(self, error: Exception) -> bool:
        """Whether a failed attempt should be retried. Subclasses narrow this down."""
        return True

    @abstractmethod
    async def _complete_impl(self, conversation: Conversation, tools: List[ToolSchema]) -> AssistantTurn:
        pass
