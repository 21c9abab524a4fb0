"""Search tools the agent can use out of the box."""

from typing import List, Optional

from agent_toolkit.llm_core.config import BraveToolConfig
from agent_toolkit.llm_core.tools import ToolFunction
from .duckduckgo import DuckDuckGoSearchConfig, DuckDuckGoSearchResult, DuckDuckGoSearchTool, RelatedTopic
from .brave import (
    BraveImageResult,
    BraveNewsResult,
    BraveSearchCategory,
    BraveSearchResult,
    BraveSearchTool,
    BraveVideoResult,
    BraveWebResult,
    CategoryHandler,
)


def all_tools(
    brave_config: Optional[BraveToolConfig] = None,
    duckduckgo_config: Optional[DuckDuckGoSearchConfig] = None,
) -> List[ToolFunction]:
    """DuckDuckGo plus, when a Brave config is given, one Brave tool per category."""
    tools = [DuckDuckGoSearchTool.create(duckduckgo_config)]
    if brave_config is not None:
        tools.extend(BraveSearchTool.create(category, brave_config) for category in BraveSearchCategory)
    return tools


__all__ = [
    "all_tools",
    "DuckDuckGoSearchConfig",
    "DuckDuckGoSearchResult",
    "DuckDuckGoSearchTool",
    "RelatedTopic",
    "BraveImageResult",
    "BraveNewsResult",
    "BraveSearchCategory",
    "BraveSearchResult",
    "BraveSearchTool",
    "BraveVideoResult",
    "BraveWebResult",
    "CategoryHandler",
]
