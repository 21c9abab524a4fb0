"""Pick and construct a model client from a ``ProviderConfig``."""

from typing import Any

from google import genai
from openai import AsyncOpenAI

from agent_toolkit.llm_core import ModelClient, get_logger
from agent_toolkit.llm_core.config import Provider, ProviderConfig
from .gemini import GeminiModelClient
from .openai_api import OpenAIModelClient

logger = get_logger(__name__)


def create_client(config: ProviderConfig, **kwargs: Any) -> ModelClient:
    """
    Create the model client matching ``config.model``.

    Args:
        config: Provider configuration, e.g. from ``load_provider_config()``.
        **kwargs: Passed on to the client (``temp``, ``max_tokens``, ``max_retries``, ...).

    Returns:
        An ``OpenAIModelClient`` for ``openai/...`` models, a ``GeminiModelClient`` for ``gemini/...``.
    """
    if config.provider is Provider.GEMINI:
        logger.info(f"Creating Gemini client for model '{config.model_name}'.")
        return GeminiModelClient(genai.Client(api_key=config.api_key).aio, config.model_name, **kwargs)

    logger.info(f"Creating OpenAI client for model '{config.model_name}'.")
    return OpenAIModelClient(AsyncOpenAI(api_key=config.api_key, base_url=config.base_url), config.model_name, **kwargs)
