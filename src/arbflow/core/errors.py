"""Error taxonomy for the localization pipeline."""

from __future__ import annotations


class ArbflowError(Exception):
    """Base class for all errors raised by arbflow."""


class ConfigurationError(ArbflowError, ValueError):
    """Fatal misconfiguration: missing folder, file, provider or credential."""


class PromptTemplateError(ConfigurationError):
    """A prompt template pair could not be loaded."""


class InvalidLLMResponseError(ArbflowError):
    """The LLM reply does not follow the final-answer contract."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class ResponseFormatError(InvalidLLMResponseError):
    """The final answer was found but its payload is malformed."""


class LanguageDetectionError(ArbflowError):
    """No usable language tag could be derived from the LLM answer."""


class ArbWriteError(ArbflowError):
    """The shared ARB file could not be persisted."""
