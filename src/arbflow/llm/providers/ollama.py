"""Ollama LLM provider using the Ollama REST API."""

from __future__ import annotations

import httpx

from arbflow.core.config import LLMConfig
from arbflow.llm.client import LLMClient
from arbflow.llm.providers._retry import request_with_retry


class OllamaClient(LLMClient):
    """Talks to a local Ollama instance."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._http = httpx.AsyncClient(
            base_url=config.resolved_base_url(),
            timeout=httpx.Timeout(config.timeout_seconds),
        )

    # -- public API ----------------------------------------------------------

    async def chat(
        self,
        messages: list[dict],
        *,
        temperature: float | None = None,
    ) -> str:
        options: dict = {"temperature": self._temperature(temperature)}
        if self.config.max_tokens is not None:
            options["num_predict"] = self.config.max_tokens
        payload = {
            "model": self.config.model,
            "messages": messages,
            "stream": False,
            "options": options,
        }
        resp = await request_with_retry(
            self._http, "POST", "/api/chat",
            max_retries=self.config.max_retries, json=payload,
        )
        resp.raise_for_status()
        return resp.json()["message"]["content"]

    async def is_available(self) -> bool:
        try:
            r = await self._http.get("/api/tags")
            return r.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._http.aclose()
