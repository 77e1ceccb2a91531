"""Application configuration loaded from environment, .env and CLI flags."""

from __future__ import annotations

import os

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_BASE_URLS: dict[str, str] = {
    "openai": "https://api.openai.com",
    "mistral": "https://api.mistral.ai",
    "google": "https://generativelanguage.googleapis.com",
    "ollama": "http://localhost:11434",
}


class LLMConfig(BaseSettings):
    """LLM provider configuration."""

    model_config = {"env_prefix": "ARBFLOW_LLM_", "env_file": ".env", "extra": "ignore"}

    provider: str = "openai"
    model: str = "gpt-4o-mini"
    api_key: str | None = None
    base_url: str | None = None
    temperature: float = 0.0
    timeout_seconds: int = 120
    max_retries: int = 5
    max_tokens: int | None = None

    def resolved_base_url(self) -> str:
        if self.base_url:
            return self.base_url
        return DEFAULT_BASE_URLS.get(self.provider.lower(), "")

    def resolved_api_key(self) -> str | None:
        """Explicit key first, then the provider's conventional env variable."""
        if self.api_key:
            return self.api_key
        return os.environ.get(f"{self.provider.upper()}_API_KEY") or None


class L10nConfig(BaseSettings):
    """Localization run configuration."""

    model_config = {"env_prefix": "ARBFLOW_L10N_", "env_file": ".env", "extra": "ignore"}

    arbs_folder: str = "lib/l10n"
    files: list[str] = Field(default_factory=list)
    prompts_dir: str | None = None
    arb_prefix: str = "app_"


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "ARBFLOW_", "env_file": ".env", "extra": "ignore"}

    log_level: str = "INFO"

    llm: LLMConfig = Field(default_factory=LLMConfig)
    l10n: L10nConfig = Field(default_factory=L10nConfig)
