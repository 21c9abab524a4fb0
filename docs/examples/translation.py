"""
Tone-controlled translation with a single model call, no tools involved.

Required environment (or .env): LLM_MODEL and the matching API key.
"""

import asyncio
from enum import Enum

from agent_toolkit.llm_core import (
    ConfigurationError,
    Conversation,
    ModelClient,
    Result,
    SystemMessage,
    UserMessage,
    load_provider_config,
)
from agent_toolkit.llm_impl import create_client

SYSTEM_PROMPT = """You are a helpful assistant specialized in translating text.
When given text, provide a translation that:
- Accurately conveys the meaning of the original text
- Sounds natural and idiomatic in the target language

Return only the translated text without additional commentary."""


class Tone(str, Enum):
    INFORMAL = "informal"
    FORMAL = "formal"


async def translate(client: ModelClient, text: str, language: str, tone: Tone) -> Result:
    """Translate ``text`` into ``language`` using the requested tone."""
    conversation = Conversation().append(
        SystemMessage(content=f"{SYSTEM_PROMPT}\n\nUse a {tone.value} tone."),
        UserMessage(content=f"Translate into {language}:\n\n{text}"),
    )
    return (await client.complete(conversation, [])).map(lambda turn: turn.content.strip())


async def main() -> None:
    text, language = "Hello, how are you?", "French"
    try:
        client = create_client(load_provider_config())
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        return

    print(f"Text to translate: {text}")
    print(f"Target language: {language}")
    for tone in Tone:
        result = await translate(client, text, language, tone)
        if result.is_err:
            print(f"Error: {result.error}")
            return
        print(f"{tone.value.capitalize()}: {result.value}")


if __name__ == "__main__":
    asyncio.run(main())
