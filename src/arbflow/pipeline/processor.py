"""L10nProcessor: the full localization workflow.

Steps:
    1. Validate the ARB folder and detect the languages it ships.
    2. Detect the source language from the first Flutter file.
    3. Extract new ARB entries from every Flutter file, rewriting the Dart
       sources the LLM returns and merging entries into the source ARB.
    4. Translate the new entries into every other detected language.
"""

from __future__ import annotations

import logging
from pathlib import Path

from arbflow.arb.languages import LanguageDetector, arb_path_for, detect_candidate_languages
from arbflow.core.config import L10nConfig
from arbflow.core.errors import ConfigurationError
from arbflow.core.types import RunReport
from arbflow.llm.client import LLMClient
from arbflow.pipeline.extraction import ExtractionStage
from arbflow.pipeline.translation import TranslationStage
from arbflow.prompts.invoker import PromptInvoker
from arbflow.prompts.store import PromptStore

logger = logging.getLogger(__name__)


class L10nProcessor:
    """Orchestrates detection, extraction and translation for one ARB folder.

    Args:
        client: The LLM capability.
        config: Folder, files and template settings for the run.
        store: Optional PromptStore; defaults to ``config.prompts_dir`` or the
            packaged templates.
        log: Optional logger passed down to every stage.
    """

    def __init__(
        self,
        client: LLMClient,
        config: L10nConfig,
        store: PromptStore | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._log = log or logger
        self._invoker = PromptInvoker(
            client, store or PromptStore(config.prompts_dir), log=self._log
        )

    def _validate(self) -> tuple[Path, list[str]]:
        folder = Path(self._config.arbs_folder)
        if not folder.is_dir():
            raise ConfigurationError(f"ARB folder not found: {folder}")
        if not self._config.files:
            raise ConfigurationError("No Flutter files given")
        first = Path(self._config.files[0])
        if not first.is_file():
            raise ConfigurationError(f"Flutter file not found: {first}")
        listing = sorted(p.name for p in folder.iterdir() if p.is_file())
        return folder, listing

    async def process(self) -> RunReport:
        """Execute the workflow and return a summary of what it did."""
        folder, listing = self._validate()
        prefix = self._config.arb_prefix

        candidates = detect_candidate_languages(listing, prefix)
        self._log.info("ARB languages found: %s", ", ".join(candidates) or "none")
        report = RunReport(candidate_languages=candidates)

        sample = Path(self._config.files[0]).read_text(encoding="utf-8")
        detector = LanguageDetector(self._invoker, log=self._log)
        source = await detector.choose_source_language(sample, candidates)
        report.source_language = source

        extraction = ExtractionStage(
            self._invoker, arb_path_for(folder, source, prefix), source, log=self._log
        )
        report.files = await extraction.run(list(self._config.files))
        report.new_keys = list(extraction.accumulator)

        targets = {
            tag: arb_path_for(folder, tag, prefix)
            for tag in candidates
            if tag != source
        }
        translation = TranslationStage(self._invoker, log=self._log)
        report.translated_languages = await translation.run(
            extraction.accumulator_json(), targets
        )

        self._log.info("Localization finished: %s", report.summary())
        return report
