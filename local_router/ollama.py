"""Minimal Ollama client: one non-streaming /api/generate call."""

import asyncio
from typing import Any

import httpx
from loguru import logger

from local_router.errors import (
    BackendHTTPError,
    BackendMalformedResponse,
    BackendTimeout,
    BackendUnreachable,
)


async def _post_generate(
    url: str,
    payload: dict[str, Any],
    timeout_s: float,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.Response:
    async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
        return await client.post(url, json=payload)


async def generate(
    prompt: str,
    model: str,
    base_url: str,
    timeout_ms: int,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Send a prompt to a local Ollama server and return the generated text.

    The whole request, body included, must finish within ``timeout_ms``;
    otherwise it is cancelled.

    Raises:
        BackendTimeout: The deadline passed before a response arrived.
        BackendUnreachable: Connection or transport failure, or an unusable base URL.
        BackendHTTPError: Non-2xx status.
        BackendMalformedResponse: Body is not ``{"response": str, "done": true}``.
    """
    url = f"{base_url.rstrip('/')}/api/generate"
    payload = {"model": model, "prompt": prompt, "stream": False}
    timeout_s = timeout_ms / 1000

    try:
        res = await asyncio.wait_for(
            _post_generate(url, payload, timeout_s, transport), timeout=timeout_s,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise BackendTimeout(timeout_ms) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise BackendUnreachable(f"Ollama request to {url} failed: {e}") from e

    if not res.is_success:
        raise BackendHTTPError(res.status_code, res.reason_phrase)

    try:
        data = res.json()
    except ValueError as e:
        raise BackendMalformedResponse("Ollama response is not JSON") from e

    if not isinstance(data, dict) or data.get("done") is not True or not isinstance(data.get("response"), str):
        raise BackendMalformedResponse("Unexpected Ollama response format")

    logger.debug(f"Ollama query succeeded (model={model}, base_url={base_url})")
    return data["response"].strip()
