"""Expose the Gemini model client and its schema sanitizer."""

from .client import GeminiModelClient
from . import schema_sanitizer

__all__ = ["GeminiModelClient", "schema_sanitizer"]
