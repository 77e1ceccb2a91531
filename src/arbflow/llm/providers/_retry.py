"""Shared retry loop for HTTP-backed providers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


async def request_with_retry(
    http: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    max_retries: int,
    **kwargs: Any,
) -> httpx.Response:
    """Execute an HTTP request with retry on 5xx, 429 and transport errors."""
    max_attempts = max(1, max_retries + 1)
    last_resp: httpx.Response | None = None

    for attempt in range(max_attempts):
        try:
            resp = await http.request(method, url, **kwargs)
            # Don't retry on client errors other than rate limiting
            if resp.status_code < 500 and resp.status_code != 429:
                return resp
            last_resp = resp
            if attempt < max_attempts - 1:
                delay = 0.5 * (2 ** attempt)
                logger.warning(
                    "Request to %s returned %d, retrying in %.1fs (%d/%d)",
                    url, resp.status_code, delay, attempt + 1, max_attempts,
                )
                await asyncio.sleep(delay)
                continue
            return resp
        except httpx.TransportError as exc:
            if attempt < max_attempts - 1:
                delay = 0.5 * (2 ** attempt)
                logger.warning(
                    "Transport error on %s: %s, retrying in %.1fs (%d/%d)",
                    url, exc, delay, attempt + 1, max_attempts,
                )
                await asyncio.sleep(delay)
                continue
            raise

    return last_resp  # type: ignore[return-value]
