"""LLM provider abstraction layer."""

from arbflow.llm.client import LLMClient, create_llm_client

__all__ = ["LLMClient", "create_llm_client"]
