"""Translation stage: push the run's new entries into every other language."""

from __future__ import annotations

import logging
from pathlib import Path

from arbflow.arb.merge import dump_arb, merge_json_strings, parse_arb
from arbflow.core.errors import ArbWriteError, ResponseFormatError
from arbflow.pipeline.extraction import strip_wrappers
from arbflow.prompts.invoker import PromptInvoker
from arbflow.storage.atomic import atomic_write, read_text_or_default

logger = logging.getLogger(__name__)

TRANSLATION_TEMPLATE = "amendArb"


class TranslationStage:
    """Translates the accumulator into each target ARB file in turn."""

    def __init__(
        self,
        invoker: PromptInvoker,
        log: logging.Logger | None = None,
    ) -> None:
        self._invoker = invoker
        self._log = log or logger

    async def translate(self, source_json: str, language: str, arb_path: str | Path) -> str:
        """Translate *source_json* into *language* and merge it into *arb_path*.

        Returns the merged content that was written.
        """
        self._log.info("Translating entries into %s", language)
        answer = await self._invoker.invoke(
            TRANSLATION_TEMPLATE,
            human={"lang_tag": language, "input": source_json},
            last_marker=True,
        )
        try:
            translated = dump_arb(parse_arb(strip_wrappers(answer)))
        except ValueError as exc:
            raise ResponseFormatError(
                f"Malformed JSON in translation into {language!r}: {exc}", raw=answer
            ) from exc

        existing = read_text_or_default(arb_path, "{}")
        merged = merge_json_strings(existing, translated, log=self._log)
        try:
            atomic_write(arb_path, merged, log=self._log)
        except OSError as exc:
            raise ArbWriteError(f"Could not write {arb_path}: {exc}") from exc
        return merged

    async def run(self, source_json: str, targets: dict[str, Path]) -> list[str]:
        """Translate into every language of *targets* (tag -> ARB path), in order."""
        done: list[str] = []
        for language, arb_path in targets.items():
            await self.translate(source_json, language, arb_path)
            done.append(language)
        return done
