"""Web, news, image and video search through the Brave Search API.

Each ``BraveSearchCategory`` is served by one ``CategoryHandler`` that knows
its endpoint, how it spells safe-search levels and how to read its payload.
``BraveSearchTool.create`` turns a category into a ready-to-register tool::

    config = load_brave_search_config()
    tools = [BraveSearchTool.create(category, config) for category in BraveSearchCategory]
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import BaseModel

from agent_toolkit.llm_core import get_logger
from agent_toolkit.llm_core.config import BraveToolConfig, SafeSearch
from agent_toolkit.llm_core.result import Err, Ok, Result
from agent_toolkit.llm_core.tools import ArgumentExtractor, Schema, ToolBuilder, ToolFunction
from .http import describe_http_error, fetch_json

logger = get_logger(__name__)

REQUEST_TIMEOUT = 15.0


class BraveWebResult(BaseModel):
    title: str
    url: str
    description: str = ""


class BraveNewsResult(BaseModel):
    title: str
    url: str
    description: str = ""
    age: Optional[str] = None
    source: Optional[str] = None


class BraveImageResult(BaseModel):
    title: str
    url: str
    image_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    source: Optional[str] = None


class BraveVideoResult(BaseModel):
    title: str
    url: str
    description: str = ""
    age: Optional[str] = None
    duration: Optional[str] = None
    creator: Optional[str] = None


BraveResultItem = Union[BraveWebResult, BraveNewsResult, BraveImageResult, BraveVideoResult]


class BraveSearchResult(BaseModel):
    """
    Results of one Brave query.

    Attributes:
        query: The query as sent.
        category: Which Brave vertical answered.
        results: Hits in ranking order; their shape depends on the category.
    """

    query: str
    category: str
    results: List[BraveResultItem]


class CategoryHandler(ABC):
    """Everything that differs between the Brave search verticals."""

    #: Path below the API base URL.
    endpoint: str
    #: Upper bound Brave accepts for ``count``.
    max_count: int = 20

    def map_safe_search(self, level: SafeSearch) -> str:
        """Brave's spelling of ``level`` for this vertical."""
        return level.value

    @abstractmethod
    def parse_results(self, payload: Dict[str, Any]) -> List[BraveResultItem]:
        pass

    @staticmethod
    def _items(container: Any) -> List[Dict[str, Any]]:
        results = container.get("results") if isinstance(container, dict) else None
        return [item for item in results or [] if isinstance(item, dict) and item.get("url")]


class WebHandler(CategoryHandler):
    endpoint = "web/search"

    def parse_results(self, payload: Dict[str, Any]) -> List[BraveResultItem]:
        return [
            BraveWebResult(title=item.get("title", ""), url=item["url"], description=item.get("description", ""))
            for item in self._items(payload.get("web"))
        ]


class NewsHandler(CategoryHandler):
    endpoint = "news/search"

    def parse_results(self, payload: Dict[str, Any]) -> List[BraveResultItem]:
        return [
            BraveNewsResult(
                title=item.get("title", ""),
                url=item["url"],
                description=item.get("description", ""),
                age=item.get("age"),
                source=(item.get("meta_url") or {}).get("hostname"),
            )
            for item in self._items(payload)
        ]


class ImageHandler(CategoryHandler):
    endpoint = "images/search"
    max_count = 100

    def map_safe_search(self, level: SafeSearch) -> str:
        # The image vertical only knows "off" and "strict"
        return SafeSearch.OFF.value if level is SafeSearch.OFF else SafeSearch.STRICT.value

    def parse_results(self, payload: Dict[str, Any]) -> List[BraveResultItem]:
        return [
            BraveImageResult(
                title=item.get("title", ""),
                url=item["url"],
                image_url=(item.get("properties") or {}).get("url"),
                thumbnail_url=(item.get("thumbnail") or {}).get("src"),
                source=item.get("source"),
            )
            for item in self._items(payload)
        ]


class VideoHandler(CategoryHandler):
    endpoint = "videos/search"
    max_count = 50

    def parse_results(self, payload: Dict[str, Any]) -> List[BraveResultItem]:
        results: List[BraveResultItem] = []
        for item in self._items(payload):
            video = item.get("video") or {}
            results.append(
                BraveVideoResult(
                    title=item.get("title", ""),
                    url=item["url"],
                    description=item.get("description", ""),
                    age=item.get("age"),
                    duration=video.get("duration"),
                    creator=video.get("creator"),
                )
            )
        return results


class BraveSearchCategory(str, Enum):
    """The Brave search verticals exposed as tools."""

    WEB = "web"
    NEWS = "news"
    IMAGE = "image"
    VIDEO = "video"

    @property
    def handler(self) -> CategoryHandler:
        return _HANDLERS[self]

    @property
    def tool_name(self) -> str:
        return f"brave_{self.value}_search"


_HANDLERS: Dict[BraveSearchCategory, CategoryHandler] = {
    BraveSearchCategory.WEB: WebHandler(),
    BraveSearchCategory.NEWS: NewsHandler(),
    BraveSearchCategory.IMAGE: ImageHandler(),
    BraveSearchCategory.VIDEO: VideoHandler(),
}

_DESCRIPTIONS = {
    BraveSearchCategory.WEB: "Search the web using Brave Search. Returns titles, URLs and snippets of matching pages.",
    BraveSearchCategory.NEWS: "Search recent news articles using Brave Search. Returns headlines, URLs, age and source.",
    BraveSearchCategory.IMAGE: "Search images using Brave Search. Returns titles, page URLs and image URLs.",
    BraveSearchCategory.VIDEO: "Search videos using Brave Search. Returns titles, URLs, duration and creator.",
}


class BraveSearchTool:
    """Factory for the ``brave_*_search`` tools."""

    @classmethod
    def create(
        cls,
        category: BraveSearchCategory,
        config: BraveToolConfig,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> ToolFunction:
        """
        Create the search tool for one category.

        Args:
            category: Which vertical to search.
            config: Endpoint, default result count and safe-search level.
            api_key: Overrides ``config.api_key``.
            transport: Optional httpx transport, mainly for tests.

        Returns:
            A ``ToolFunction`` named ``brave_<category>_search`` taking ``query``
            and an optional ``count``.
        """
        category = BraveSearchCategory(category)
        handler_impl = category.handler
        key = api_key or config.api_key
        schema = (
            Schema.object(f"Brave {category.value} search parameters")
            .with_property("query", Schema.string("The search query"))
            .with_property(
                "count",
                Schema.integer(f"Number of results to return (1-{handler_impl.max_count}, default {config.count})"),
                required=False,
            )
        )

        async def handler(extractor: ArgumentExtractor) -> Result[BraveSearchResult, Any]:
            query = extractor.get_string("query")
            if isinstance(query, Err):
                return query
            count = extractor.get_integer("count", default=config.count)
            if isinstance(count, Err):
                return count
            return await cls.search(category, query.value, count.value, config, key, transport)

        return (
            ToolBuilder(category.tool_name, _DESCRIPTIONS[category], schema)
            .with_handler(handler)
            .with_timeout(REQUEST_TIMEOUT + 5.0)
            .build()
        )

    @staticmethod
    async def search(
        category: BraveSearchCategory,
        query: str,
        count: int,
        config: BraveToolConfig,
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> Result[BraveSearchResult, str]:
        handler_impl = category.handler
        if not query.strip():
            return Err("Search query must not be empty.")
        if not 1 <= count <= handler_impl.max_count:
            return Err(f"count must be between 1 and {handler_impl.max_count}, got {count}.")

        url = f"{config.api_url.rstrip('/')}/{handler_impl.endpoint}"
        params = {"q": query, "count": count, "safesearch": handler_impl.map_safe_search(config.safe_search)}
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
            "X-Subscription-Token": api_key,
        }
        try:
            payload = await fetch_json(url, params, headers, REQUEST_TIMEOUT, transport)
            results = handler_impl.parse_results(payload)
        except (httpx.HTTPError, ValueError) as exc:
            msg = f"Brave {category.value} search failed: {describe_http_error(exc)}"
            logger.warning(msg)
            return Err(msg)

        if not results:
            return Err(f"No {category.value} results found for '{query}'.")
        return Ok(BraveSearchResult(query=query, category=category.value, results=results))
