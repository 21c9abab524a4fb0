"""Expose the OpenAI Chat Completions model client."""

from .client import OpenAIModelClient

__all__ = ["OpenAIModelClient"]
