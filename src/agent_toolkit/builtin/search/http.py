"""Shared HTTP plumbing for the search tools."""

from typing import Any, Dict, Mapping, Optional

import httpx

from agent_toolkit.llm_core import get_logger

logger = get_logger(__name__)


async def fetch_json(
    url: str,
    params: Mapping[str, Any],
    headers: Mapping[str, str],
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    GET ``url`` and decode the JSON object it returns.

    Args:
        url: Endpoint to call.
        params: Query parameters.
        headers: Request headers.
        timeout: Seconds before the request is abandoned.
        transport: Optional transport, e.g. ``httpx.MockTransport`` in tests.

    Returns:
        The decoded JSON object.

    Raises:
        httpx.HTTPError: On connection problems or a non-2xx status.
        ValueError: If the body is not a JSON object.
    """
    async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
        response = await client.get(url, params=dict(params), headers=dict(headers))
        logger.debug(f"GET {response.request.url} -> {response.status_code}")
        response.raise_for_status()
        payload = response.json()

    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}.")
    return payload


def describe_http_error(exc: Exception) -> str:
    """Turn a request failure into a short message the model can read."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP request failed with status {exc.response.status_code}"
    if isinstance(exc, httpx.TimeoutException):
        return "HTTP request timed out"
    if isinstance(exc, httpx.HTTPError):
        return f"HTTP request failed: {exc}"
    return f"Invalid response: {exc}"
