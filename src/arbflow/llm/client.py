"""Abstract LLM client interface and factory function."""

from __future__ import annotations

import abc

from arbflow.core.config import LLMConfig
from arbflow.core.errors import ConfigurationError


class LLMClient(abc.ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @abc.abstractmethod
    async def chat(
        self,
        messages: list[dict],
        *,
        temperature: float | None = None,
    ) -> str:
        """Generate a response from a list of chat messages."""

    @abc.abstractmethod
    async def is_available(self) -> bool:
        """Return True if the provider is reachable."""

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Send a system instruction and a human instruction as one exchange."""
        messages: list[dict] = []
        if system_prompt is not None:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        reply = await self.chat(messages, temperature=temperature)
        return (reply or "").strip()

    def _temperature(self, temperature: float | None) -> float:
        return self.config.temperature if temperature is None else temperature

    async def close(self) -> None:
        """Clean up resources. Override if the provider holds connections."""


def create_llm_client(config: LLMConfig) -> LLMClient:
    """Factory: select and instantiate an LLM provider based on config.provider."""

    from arbflow.llm.providers import PROVIDER_REGISTRY

    provider = config.provider.lower()
    if provider not in PROVIDER_REGISTRY:
        available = ", ".join(sorted(PROVIDER_REGISTRY))
        raise ConfigurationError(
            f"Unknown LLM provider {config.provider!r}. "
            f"Available: {available}"
        )

    cls = PROVIDER_REGISTRY[provider]
    return cls(config)
