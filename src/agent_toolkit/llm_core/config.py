"""Environment-backed configuration for model providers and built-in tools.

Values are read from the process environment after loading a ``.env`` file
(if one can be found) and validated with pydantic. Nothing is read at import
time; call the loaders explicitly and pass the result to whatever needs it.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_BRAVE_API_URL = "https://api.search.brave.com/res/v1"


class Provider(str, Enum):
    """Model providers with a client implementation."""

    OPENAI = "openai"
    GEMINI = "gemini"


class ProviderConfig(BaseModel):
    """
    Which model to talk to and how to authenticate.

    Attributes:
        model: ``provider/model`` string, e.g. ``openai/gpt-4o`` or ``gemini/gemini-2.0-flash``.
        api_key: The provider API key.
        base_url: Optional endpoint override (OpenAI-compatible servers only).
    """

    model_config = ConfigDict(frozen=True)

    model: str
    api_key: str = Field(min_length=1)
    base_url: Optional[str] = None

    @field_validator("model")
    @classmethod
    def _validate_model(cls, value: str) -> str:
        provider, sep, name = value.partition("/")
        if not sep or not name:
            raise ValueError(f"Model '{value}' must be given as 'provider/model'.")
        if provider not in {p.value for p in Provider}:
            raise ValueError(f"Unknown provider '{provider}'. Expected one of: openai, gemini.")
        return value

    @property
    def provider(self) -> Provider:
        return Provider(self.model.partition("/")[0])

    @property
    def model_name(self) -> str:
        return self.model.partition("/")[2]


class SafeSearch(str, Enum):
    """Safe-search levels understood by the search tools."""

    OFF = "off"
    MODERATE = "moderate"
    STRICT = "strict"


class BraveToolConfig(BaseModel):
    """
    Settings for the Brave Search tools.

    Attributes:
        api_key: Subscription token sent as ``X-Subscription-Token``.
        api_url: Base URL of the Brave Search API.
        count: Default number of results per query.
        safe_search: Default safe-search level.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    api_url: str = DEFAULT_BRAVE_API_URL
    count: int = Field(default=5, ge=1, le=20)
    safe_search: SafeSearch = SafeSearch.MODERATE


def _load_env(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    if environ is not None:
        return environ
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)
        logger.debug(f"Loaded environment from {env_file}")
    return os.environ


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in err['loc']) or 'value'}: {err['msg']}" for err in exc.errors())


def load_provider_config(environ: Optional[Mapping[str, str]] = None) -> ProviderConfig:
    """
    Build a ``ProviderConfig`` from the environment.

    Reads ``LLM_MODEL`` and the key matching its provider: ``OPENAI_API_KEY``
    (plus optional ``OPENAI_BASE_URL``) for OpenAI, ``GOOGLE_API_KEY`` or
    ``GEMINI_API_KEY`` for Gemini.

    Args:
        environ: Mapping to read from instead of ``os.environ`` (no ``.env`` loading then).

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If a variable is missing or invalid.
    """
    env = _load_env(environ)
    model = env.get("LLM_MODEL")
    if not model:
        raise ConfigurationError("LLM_MODEL is not set. Expected e.g. 'openai/gpt-4o'.")

    provider = model.partition("/")[0]
    if provider == Provider.GEMINI.value:
        api_key = env.get("GOOGLE_API_KEY") or env.get("GEMINI_API_KEY")
        key_name = "GOOGLE_API_KEY or GEMINI_API_KEY"
        base_url = None
    else:
        api_key = env.get("OPENAI_API_KEY")
        key_name = "OPENAI_API_KEY"
        base_url = env.get("OPENAI_BASE_URL") or None

    if not api_key and provider in {p.value for p in Provider}:
        raise ConfigurationError(f"{key_name} is not set (required for model '{model}').")

    try:
        return ProviderConfig(model=model, api_key=api_key or "", base_url=base_url)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid provider configuration: {_validation_message(exc)}") from exc


def load_brave_search_config(environ: Optional[Mapping[str, str]] = None) -> BraveToolConfig:
    """
    Build a ``BraveToolConfig`` from ``BRAVE_SEARCH_*`` variables.

    Args:
        environ: Mapping to read from instead of ``os.environ`` (no ``.env`` loading then).

    Raises:
        ConfigurationError: If the API key is missing or a value is invalid.
    """
    env = _load_env(environ)
    api_key = env.get("BRAVE_SEARCH_API_KEY")
    if not api_key:
        raise ConfigurationError("BRAVE_SEARCH_API_KEY is not set.")

    values = {"api_key": api_key}
    for field_name, var in (
        ("api_url", "BRAVE_SEARCH_API_URL"),
        ("count", "BRAVE_SEARCH_COUNT"),
        ("safe_search", "BRAVE_SEARCH_SAFE_SEARCH"),
    ):
        raw = env.get(var)
        if raw:
            values[field_name] = raw.strip().lower() if field_name == "safe_search" else raw.strip()

    try:
        return BraveToolConfig(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid Brave Search configuration: {_validation_message(exc)}") from exc
