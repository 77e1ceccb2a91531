"""OpenAI-compatible chat completions provider (OpenAI, Mistral)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from arbflow.core.config import LLMConfig
from arbflow.llm.client import LLMClient
from arbflow.llm.providers._retry import request_with_retry

logger = logging.getLogger(__name__)


class OpenAICompatClient(LLMClient):
    """Talks to any server that exposes the OpenAI /v1/chat/completions API."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        headers: dict[str, str] = {}
        api_key = config.resolved_api_key()
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._http = httpx.AsyncClient(
            base_url=config.resolved_base_url(),
            timeout=httpx.Timeout(config.timeout_seconds),
            headers=headers,
        )

    # -- public API ----------------------------------------------------------

    async def chat(
        self,
        messages: list[dict],
        *,
        temperature: float | None = None,
    ) -> str:
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self._temperature(temperature),
            "stream": False,
        }
        if self.config.max_tokens is not None:
            payload["max_tokens"] = self.config.max_tokens

        logger.debug("Calling %s model %s", self.config.provider, self.config.model)
        resp = await request_with_retry(
            self._http, "POST", "/v1/chat/completions",
            max_retries=self.config.max_retries, json=payload,
        )
        resp.raise_for_status()
        data = resp.json()
        return data["choices"][0]["message"]["content"] or ""

    async def is_available(self) -> bool:
        try:
            r = await self._http.get("/v1/models")
            return r.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._http.aclose()
