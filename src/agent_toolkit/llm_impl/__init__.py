"""Collect concrete model provider clients."""

from .factory import create_client
from .gemini import GeminiModelClient
from .openai_api import OpenAIModelClient

__all__ = [
    "create_client",
    "GeminiModelClient",
    "OpenAIModelClient",
]
