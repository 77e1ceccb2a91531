"""Provider registry for LLM backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arbflow.llm.client import LLMClient

from arbflow.llm.providers.google import GoogleGenAIClient
from arbflow.llm.providers.ollama import OllamaClient
from arbflow.llm.providers.openai_compat import OpenAICompatClient

PROVIDER_REGISTRY: dict[str, type[LLMClient]] = {
    "openai": OpenAICompatClient,
    "mistral": OpenAICompatClient,
    "google": GoogleGenAIClient,
    "ollama": OllamaClient,
}

__all__ = ["PROVIDER_REGISTRY", "GoogleGenAIClient", "OllamaClient", "OpenAICompatClient"]
