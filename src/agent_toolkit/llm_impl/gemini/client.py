import json
from typing import Any, Dict, List, Optional

from google.genai import errors, types
from google.genai.client import AsyncClient
from google.genai.types import GenerateContentResponse

from agent_toolkit.llm_core import get_logger
from agent_toolkit.llm_core.base import ModelClient, AssistantTurn
from agent_toolkit.llm_core.messages import (
    AssistantMessage,
    Conversation,
    SystemMessage,
    ToolMessage,
    UserMessage,
)
from agent_toolkit.llm_core.result import Ok
from agent_toolkit.llm_core.tools.models import ToolCallRequest, ToolSchema, new_call_id, normalize_arguments
from .schema_sanitizer import declaration_parameters

logger = get_logger(__name__)


class GeminiModelClient(ModelClient):
    """
    ModelClient for Google's Gemini models via ``google-genai``.

    The conversation is replayed statelessly through ``models.generate_content``.
    System messages become the system instruction; tool results are sent back
    as ``function_response`` parts. Gemini may omit call ids, so missing ones
    are generated.
    """

    def __init__(
        self,
        aclient: AsyncClient,
        model_name: str,
        temp: float = 1.0,
        max_tokens: int = 3000,
        max_retries: int = 3,
        base_retry_delay: float = 1.0,
        request_timeout: Optional[float] = None,
    ):
        """
        Initializes the Gemini model client.

        Args:
            aclient: The async client of an initialized ``genai.Client`` (``client.aio``).
            model_name: The identifier for the Gemini model to use (e.g., 'gemini-2.0-flash').
            temp: The temperature for text generation, controlling randomness.
            max_tokens: The maximum number of tokens to generate in the response.
            max_retries: How often a failed request is retried.
            base_retry_delay: Delay before the first retry, doubled on each further one.
            request_timeout: Seconds a single attempt may take.
        """
        super().__init__(max_retries=max_retries, base_retry_delay=base_retry_delay, request_timeout=request_timeout)
        self.client: AsyncClient = aclient
        self.model: str = model_name
        self.temperature = temp
        self.max_tokens = max_tokens
        logger.info(f"Initialized GeminiModelClient with model='{model_name}', temp={temp}, max_tokens={max_tokens}")

    async def _complete_impl(self, conversation: Conversation, tools: List[ToolSchema]) -> AssistantTurn:
        system_instruction, contents = self._convert_conversation(conversation)
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            tools=[self._build_tool(tools)] if tools else None,
        )

        logger.debug(f"Sending {len(contents)} content(s) to Gemini model '{self.model}'.")
        response = await self.client.models.generate_content(model=self.model, contents=contents, config=config)
        return self._parse_response(response)

    def _is_retryable(self, error: Exception) -> bool:
        # 4xx besides rate limiting will not go away by retrying
        if isinstance(error, errors.ClientError):
            return error.code == 429
        return True

    @staticmethod
    def _build_tool(tools: List[ToolSchema]) -> types.Tool:
        declarations = []
        for schema in tools:
            params = declaration_parameters(schema.parameters)
            if params:
                declarations.append(
                    types.FunctionDeclaration(name=schema.name, description=schema.description, parameters=params)
                )
            else:
                declarations.append(types.FunctionDeclaration(name=schema.name, description=schema.description))
        return types.Tool(function_declarations=declarations)

    @staticmethod
    def _convert_conversation(conversation: Conversation) -> "tuple[Optional[str], List[types.Content]]":
        """
        Converts the conversation to a system instruction and Gemini contents.

        Consecutive tool results are grouped into a single content, matching
        the function calls of the preceding model turn.

        Args:
            conversation: The provider-agnostic conversation.

        Returns:
            The system instruction (or None) and the list of contents.
        """
        system_parts: List[str] = []
        contents: List[types.Content] = []
        pending_responses: List[types.Part] = []

        def flush_responses() -> None:
            if pending_responses:
                contents.append(types.Content(role="user", parts=list(pending_responses)))
                pending_responses.clear()

        for msg in conversation.messages:
            if isinstance(msg, ToolMessage):
                pending_responses.append(
                    types.Part(
                        function_response=types.FunctionResponse(
                            id=msg.tool_call_id,
                            name=msg.name,
                            response=GeminiModelClient._decode_tool_content(msg.content),
                        )
                    )
                )
                continue

            flush_responses()
            if isinstance(msg, SystemMessage):
                system_parts.append(msg.content)
            elif isinstance(msg, UserMessage):
                contents.append(types.Content(role="user", parts=[types.Part(text=msg.content)]))
            elif isinstance(msg, AssistantMessage):
                parts: List[types.Part] = []
                if msg.content:
                    parts.append(types.Part(text=msg.content))
                for call in msg.tool_calls:
                    args = normalize_arguments(call.arguments)
                    parts.append(
                        types.Part(
                            function_call=types.FunctionCall(
                                id=call.call_id,
                                name=call.name,
                                args=args.value if isinstance(args, Ok) else {},
                            )
                        )
                    )
                if parts:
                    contents.append(types.Content(role="model", parts=parts))
        flush_responses()

        system_instruction = "\n\n".join(system_parts) if system_parts else None
        return system_instruction, contents

    @staticmethod
    def _decode_tool_content(content: str) -> Dict[str, Any]:
        try:
            decoded = json.loads(content)
        except json.JSONDecodeError:
            return {"result": content}
        return decoded if isinstance(decoded, dict) else {"result": decoded}

    @staticmethod
    def _parse_response(response: GenerateContentResponse) -> AssistantTurn:
        """
        Normalizes a Gemini response into an AssistantTurn.

        Raises:
            ValueError: If the response has no candidates (e.g. the prompt was blocked).
        """
        if not response.candidates:
            raise ValueError("Gemini response contained no candidates.")

        content = response.candidates[0].content
        parts = content.parts if content and content.parts else []

        text = "".join(part.text for part in parts if part.text and not part.thought)
        calls = [
            ToolCallRequest(
                name=part.function_call.name or "",
                arguments=dict(part.function_call.args or {}),
                call_id=part.function_call.id or new_call_id(),
            )
            for part in parts
            if part.function_call
        ]
        return AssistantTurn(content=text, tool_calls=tuple(calls), raw=response)
