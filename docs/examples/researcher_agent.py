"""
Researcher agent: lets the model combine all four Brave Search tools.

Required environment (or .env):
    LLM_MODEL=openai/gpt-4o
    OPENAI_API_KEY=sk-...
    BRAVE_SEARCH_API_KEY=...
"""

import asyncio

from agent_toolkit.builtin.search import BraveSearchCategory, BraveSearchTool
from agent_toolkit.llm_core import (
    Agent,
    AgentOptions,
    ConfigurationError,
    Err,
    SafeSearch,
    ToolRegistry,
    get_logger,
    load_brave_search_config,
    load_provider_config,
    setup_logging,
)
from agent_toolkit.llm_impl import create_client

logger = get_logger(__name__)

RESEARCH_TOPIC = "Climate change impacts on Arctic wildlife"

RESEARCH_PROMPT = """You are an expert research assistant with access to multiple search tools.

Your role is to conduct thorough, multi-modal research on topics by:
- Using web search for foundational knowledge and comprehensive information
- Using news search for recent developments and current events
- Using image search to find visual references, diagrams and photographs
- Using video search to find explanatory content and documentaries

Always use several search types, then synthesize the findings into a clear, structured report."""

RESEARCH_QUERY = f"""Conduct comprehensive research on: "{RESEARCH_TOPIC}"

1. Use brave_web_search to gather foundational information and key facts
2. Use brave_news_search to find recent developments
3. Use brave_image_search to find relevant visual references
4. Use brave_video_search to find explanatory videos or documentaries

Format your final response with sections for Web Findings, News Updates, Visual References,
Video Resources and Research Summary."""


async def main() -> None:
    setup_logging()
    try:
        provider = load_provider_config()
        brave = load_brave_search_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        print("Example: export LLM_MODEL=openai/gpt-4o OPENAI_API_KEY=... BRAVE_SEARCH_API_KEY=...")
        return

    media = brave.model_copy(update={"count": 2, "safe_search": SafeSearch.STRICT})
    registry = ToolRegistry(
        [
            BraveSearchTool.create(BraveSearchCategory.WEB, brave.model_copy(update={"count": 10})),
            BraveSearchTool.create(BraveSearchCategory.NEWS, brave.model_copy(update={"count": 10})),
            BraveSearchTool.create(BraveSearchCategory.IMAGE, media),
            BraveSearchTool.create(BraveSearchCategory.VIDEO, media),
        ]
    )
    agent = Agent(create_client(provider, request_timeout=120.0))

    print(f"Research topic: {RESEARCH_TOPIC}")
    result = await agent.run(
        RESEARCH_QUERY, registry, AgentOptions(system_prompt_addition=RESEARCH_PROMPT, max_turns=8, max_concurrency=4)
    )

    if isinstance(result, Err):
        print(f"Research failed: {result.error}")
        return

    state = result.value
    print("=" * 70)
    print(f"RESEARCH SUMMARY ({state.status.value} after {state.turn} turn(s))")
    print("=" * 70)
    print(state.final_answer or "No research summary available")


if __name__ == "__main__":
    asyncio.run(main())
