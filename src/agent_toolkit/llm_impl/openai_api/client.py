from openai import AsyncOpenAI, AuthenticationError, BadRequestError, NotFoundError, PermissionDeniedError
from openai.types.chat import ChatCompletion
from typing import List, Optional, Any, Dict, Iterable, cast

from agent_toolkit.llm_core import get_logger
from agent_toolkit.llm_core.base import ModelClient, AssistantTurn
from agent_toolkit.llm_core.messages import (
    AssistantMessage,
    BaseMessage,
    Conversation,
    SystemMessage,
    ToolMessage,
    UserMessage,
)
from agent_toolkit.llm_core.tools.models import ToolCallRequest, ToolSchema, new_call_id, to_json

logger = get_logger(__name__)

_NON_RETRYABLE = (AuthenticationError, BadRequestError, NotFoundError, PermissionDeniedError)


class OpenAIModelClient(ModelClient):
    """
    ModelClient for OpenAI's Chat Completions API and compatible servers.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model_name: str,
        temp: float = 1.0,
        max_tokens: int = 3000,
        max_retries: int = 3,
        base_retry_delay: float = 1.0,
        request_timeout: Optional[float] = None,
    ):
        """
        Initializes the OpenAI model client.

        Args:
            client: The initialized AsyncOpenAI client.
            model_name: The identifier for the OpenAI model to use (e.g., 'gpt-4o').
            temp: The temperature for text generation, controlling randomness.
            max_tokens: The maximum number of tokens to generate in the response.
            max_retries: How often a failed request is retried.
            base_retry_delay: Delay before the first retry, doubled on each further one.
            request_timeout: Seconds a single attempt may take.
        """
        super().__init__(max_retries=max_retries, base_retry_delay=base_retry_delay, request_timeout=request_timeout)
        self.client: AsyncOpenAI = client
        self.model: str = model_name
        self.temperature = temp
        self.max_tokens = max_tokens

    async def _complete_impl(self, conversation: Conversation, tools: List[ToolSchema]) -> AssistantTurn:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": cast(Iterable[Any], self._convert_conversation(conversation)),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if tools:
            kwargs["tools"] = self._convert_tools(tools)

        logger.debug(f"Sending {len(conversation)} message(s) to OpenAI model '{self.model}'.")
        response: ChatCompletion = await self.client.chat.completions.create(**kwargs)
        return self._parse_response(response)

    def _is_retryable(self, error: Exception) -> bool:
        return not isinstance(error, _NON_RETRYABLE)

    @staticmethod
    def _convert_conversation(conversation: Conversation) -> List[Dict[str, Any]]:
        """
        Converts the conversation to OpenAI message dictionaries.

        Args:
            conversation: The provider-agnostic conversation.

        Returns:
            List of OpenAI message dictionaries.
        """
        openai_messages = []
        for msg in conversation.messages:
            openai_messages.append(OpenAIModelClient._convert_message(msg))
        return openai_messages

    @staticmethod
    def _convert_message(msg: BaseMessage) -> Dict[str, Any]:
        if isinstance(msg, SystemMessage):
            return {"role": "system", "content": msg.content}
        if isinstance(msg, UserMessage):
            return {"role": "user", "content": msg.content}
        if isinstance(msg, AssistantMessage):
            openai_msg: Dict[str, Any] = {"role": "assistant", "content": msg.content or None}
            if msg.tool_calls:
                openai_msg["tool_calls"] = [
                    {
                        "id": call.call_id,
                        "type": "function",
                        "function": {
                            "name": call.name,
                            "arguments": call.arguments if isinstance(call.arguments, str) else to_json(call.arguments or {}),
                        },
                    }
                    for call in msg.tool_calls
                ]
            return openai_msg
        if isinstance(msg, ToolMessage):
            return {"role": "tool", "tool_call_id": msg.tool_call_id, "content": msg.content}
        raise TypeError(f"Unsupported message type: {type(msg).__name__}")

    @staticmethod
    def _convert_tools(tools: List[ToolSchema]) -> List[Dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": schema.name,
                    "description": schema.description,
                    "parameters": schema.parameters,
                },
            }
            for schema in tools
        ]

    @staticmethod
    def _parse_response(response: ChatCompletion) -> AssistantTurn:
        """
        Normalizes a chat completion into an AssistantTurn.

        Raises:
            ValueError: If the response carries no choices.
        """
        if not response.choices:
            raise ValueError("OpenAI response contained no choices.")

        message = response.choices[0].message
        calls: List[ToolCallRequest] = []
        for tool_call in message.tool_calls or []:
            # Only function tool calls map to tools
            if tool_call.type != "function":
                continue
            calls.append(
                ToolCallRequest(
                    name=tool_call.function.name,
                    arguments=tool_call.function.arguments,
                    call_id=tool_call.id or new_call_id(),
                )
            )

        return AssistantTurn(content=message.content or "", tool_calls=tuple(calls), raw=response)
