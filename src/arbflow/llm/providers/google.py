"""Google Gemini provider using the Generative Language REST API."""

from __future__ import annotations

from typing import Any

import httpx

from arbflow.core.config import LLMConfig
from arbflow.llm.client import LLMClient
from arbflow.llm.providers._retry import request_with_retry

_ROLE_MAP = {"user": "user", "assistant": "model"}


class GoogleGenAIClient(LLMClient):
    """Talks to ``/v1beta/models/{model}:generateContent``.

    System messages are sent as ``systemInstruction``; the remaining turns
    become ``contents`` with Gemini's ``user``/``model`` roles.
    """

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        headers: dict[str, str] = {}
        api_key = config.resolved_api_key()
        if api_key:
            headers["x-goog-api-key"] = api_key
        self._http = httpx.AsyncClient(
            base_url=config.resolved_base_url(),
            timeout=httpx.Timeout(config.timeout_seconds),
            headers=headers,
        )

    async def chat(
        self,
        messages: list[dict],
        *,
        temperature: float | None = None,
    ) -> str:
        system_parts = [
            {"text": m["content"]} for m in messages if m["role"] == "system"
        ]
        contents = [
            {"role": _ROLE_MAP.get(m["role"], "user"), "parts": [{"text": m["content"]}]}
            for m in messages
            if m["role"] != "system"
        ]
        generation: dict[str, Any] = {"temperature": self._temperature(temperature)}
        if self.config.max_tokens is not None:
            generation["maxOutputTokens"] = self.config.max_tokens
        payload: dict[str, Any] = {"contents": contents, "generationConfig": generation}
        if system_parts:
            payload["systemInstruction"] = {"parts": system_parts}

        resp = await request_with_retry(
            self._http, "POST", f"/v1beta/models/{self.config.model}:generateContent",
            max_retries=self.config.max_retries, json=payload,
        )
        resp.raise_for_status()
        data = resp.json()
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = candidates[0].get("content", {}).get("parts", [])
        return "".join(p.get("text", "") for p in parts)

    async def is_available(self) -> bool:
        try:
            r = await self._http.get("/v1beta/models")
            return r.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._http.aclose()
