"""Web lookups through DuckDuckGo's Instant Answer API.

The Instant Answer API needs no key and returns definitions, quick facts,
related topics and infobox data. It does not return full web search results;
use the Brave tools for that.
"""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from agent_toolkit.llm_core import get_logger
from agent_toolkit.llm_core.result import Err, Ok, Result
from agent_toolkit.llm_core.tools import ArgumentExtractor, Schema, ToolBuilder, ToolFunction
from .http import describe_http_error, fetch_json

logger = get_logger(__name__)

DUCKDUCKGO_API_URL = "https://api.duckduckgo.com/"
SAFE_SEARCH_ON = "1"
SAFE_SEARCH_OFF = "-1"


class DuckDuckGoSearchConfig(BaseModel):
    """
    Settings of the DuckDuckGo tool.

    Attributes:
        timeout: Request timeout in seconds.
        max_results: Maximum number of related topics to return.
        safe_search: Whether to enable safe search.
    """

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=10.0, gt=0)
    max_results: int = Field(default=10, ge=1)
    safe_search: bool = True


class RelatedTopic(BaseModel):
    text: str
    url: Optional[str] = None


class DuckDuckGoSearchResult(BaseModel):
    """What the tool hands back to the model."""

    query: str
    abstract: str = ""
    abstract_source: str = ""
    abstract_url: str = ""
    answer: str = ""
    answer_type: str = ""
    related_topics: List[RelatedTopic] = Field(default_factory=list)
    infobox: Optional[str] = None


class DuckDuckGoSearchTool:
    """Factory for the ``duckduckgo_search`` tool."""

    NAME = "duckduckgo_search"

    @classmethod
    def create(
        cls,
        config: Optional[DuckDuckGoSearchConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> ToolFunction:
        """
        Create the tool.

        Args:
            config: Tool settings, defaults to ``DuckDuckGoSearchConfig()``.
            transport: Optional httpx transport, mainly for tests.

        Returns:
            A ``ToolFunction`` taking a single ``search_query`` string.
        """
        config = config or DuckDuckGoSearchConfig()
        schema = Schema.object("DuckDuckGo search parameters").with_property(
            "search_query", Schema.string("The search query (best for definitions, facts, quick lookups)")
        )

        async def handler(extractor: ArgumentExtractor) -> Result[DuckDuckGoSearchResult, str]:
            query = extractor.get_string("search_query")
            if isinstance(query, Err):
                return query
            return await cls.search(query.value, config, transport)

        return (
            ToolBuilder(
                cls.NAME,
                "Search the web for definitions, facts, and quick answers using DuckDuckGo. "
                "Best for factual queries and definitions. Does not provide full web search results.",
                schema,
            )
            .with_handler(handler)
            .with_timeout(config.timeout + 5.0)
            .build()
        )

    @classmethod
    async def search(
        cls,
        query: str,
        config: DuckDuckGoSearchConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> Result[DuckDuckGoSearchResult, str]:
        params = {
            "q": query,
            "format": "json",
            "no_html": "1",
            "skip_disambig": "0",
            "t": "agent_toolkit",
            "safesearch": SAFE_SEARCH_ON if config.safe_search else SAFE_SEARCH_OFF,
        }
        headers = {"User-Agent": "agent-toolkit-duckduckgo-search/1.0"}
        try:
            payload = await fetch_json(DUCKDUCKGO_API_URL, params, headers, config.timeout, transport)
        except (httpx.HTTPError, ValueError) as exc:
            msg = f"DuckDuckGo search failed: {describe_http_error(exc)}"
            logger.warning(msg)
            return Err(msg)

        return Ok(cls.parse_results(query, payload, config.max_results))

    @staticmethod
    def parse_results(query: str, payload: Dict[str, Any], max_results: int) -> DuckDuckGoSearchResult:
        topics: List[RelatedTopic] = []
        for topic in payload.get("RelatedTopics") or []:
            if len(topics) >= max_results:
                break
            # Disambiguation groups carry "Topics" instead of "Text"
            if isinstance(topic, dict) and topic.get("Text"):
                topics.append(RelatedTopic(text=topic["Text"], url=topic.get("FirstURL")))

        infobox = None
        box = payload.get("Infobox")
        if isinstance(box, dict) and isinstance(box.get("content"), list):
            infobox = "\n".join(
                f"{item.get('label', '')}: {item.get('value', '')}" for item in box["content"] if isinstance(item, dict)
            )

        return DuckDuckGoSearchResult(
            query=query,
            abstract=str(payload.get("Abstract") or ""),
            abstract_source=str(payload.get("AbstractSource") or ""),
            abstract_url=str(payload.get("AbstractURL") or ""),
            answer=str(payload.get("Answer") or ""),
            answer_type=str(payload.get("AnswerType") or ""),
            related_topics=topics,
            infobox=infobox,
        )
