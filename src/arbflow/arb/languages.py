"""Detection of candidate and source languages for an ARB folder."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from arbflow.core.errors import LanguageDetectionError
from arbflow.prompts.invoker import PromptInvoker

logger = logging.getLogger(__name__)

ARB_SUFFIX = ".arb"
CHOOSE_LANGUAGE_TEMPLATE = "chooseLanguage"

_DISALLOWED_TAG_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def language_tag_from_filename(filename: str, prefix: str = "app_") -> str | None:
    """Return the tag of ``app_<tag>.arb``, or None for any other name.

    The tag is the segment between the first ``_`` and the first ``.``.
    """
    name = Path(filename).name
    if not name.startswith(prefix) or not name.endswith(ARB_SUFFIX):
        return None
    tag = name.split("_", 1)[1].split(".", 1)[0]
    return tag or None


def detect_candidate_languages(
    filenames: Iterable[str],
    prefix: str = "app_",
) -> list[str]:
    """Return the language tags found in *filenames*, in listing order.

    Unmatched names are ignored. Duplicates are dropped.
    """
    tags: list[str] = []
    for filename in filenames:
        tag = language_tag_from_filename(filename, prefix)
        if tag is not None and tag not in tags:
            tags.append(tag)
    return tags


def arb_path_for(folder: str | Path, tag: str, prefix: str = "app_") -> Path:
    return Path(folder) / f"{prefix}{tag}{ARB_SUFFIX}"


def sanitize_language_tag(raw: str) -> str:
    """Keep only ``[A-Za-z0-9_-]`` characters of an LLM answer."""
    return _DISALLOWED_TAG_CHARS.sub("", raw)


class LanguageDetector:
    """Asks the LLM which candidate language a Flutter sample is written in."""

    def __init__(
        self,
        invoker: PromptInvoker,
        log: logging.Logger | None = None,
    ) -> None:
        self._invoker = invoker
        self._log = log or logger

    async def choose_source_language(self, sample: str, candidates: list[str]) -> str:
        """Return the sanitized source language tag.

        Raises:
            LanguageDetectionError: If nothing usable remains after sanitizing.
            InvalidLLMResponseError: If the reply lacks the final-answer marker.
        """
        answer = await self._invoker.invoke(
            CHOOSE_LANGUAGE_TEMPLATE,
            system={"langs": ", ".join(candidates)},
            human={"doc": sample},
        )
        tag = sanitize_language_tag(answer)
        if not tag:
            raise LanguageDetectionError(
                f"No usable language tag in LLM answer: {answer!r}"
            )
        if candidates and tag not in candidates:
            self._log.warning(
                "Detected language %r is not among the ARB languages %s",
                tag, ", ".join(candidates),
            )
        self._log.info("Source language detected: %s", tag)
        return tag
