"""Extraction stage: new ARB entries (and rewritten Dart) from each file.

Each Flutter file is sent to the LLM together with the source-language ARB
content. The reply carries a JSON object of new entries and, optionally, the
complete rewritten Dart source::

    REPONSE FINALE :
    <JSON>{"farewell": "Bye"}</JSON>
    <dart>...new file...</dart>

Entries are folded into an in-memory accumulator (new entries win), and the
accumulator is merged into the ARB file on disk after every file (disk wins).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from arbflow.arb.merge import accumulate_entries, dump_arb, merge_json_strings, parse_arb
from arbflow.core.errors import ArbWriteError, ResponseFormatError
from arbflow.core.types import ExtractionResult, FileOutcome, FileStatus
from arbflow.prompts.invoker import PromptInvoker
from arbflow.storage.atomic import atomic_write, read_text_or_default

logger = logging.getLogger(__name__)

EXTRACTION_TEMPLATE = "process"

DART_MARKER = "<dart>"
_WRAPPER_MARKERS = ("<JSON>", "</JSON>", "</dart>")


def strip_wrappers(text: str) -> str:
    for marker in _WRAPPER_MARKERS:
        text = text.replace(marker, "")
    return text


def parse_extraction_response(answer: str) -> ExtractionResult:
    """Split an extraction answer into new entries and optional Dart source.

    Raises:
        ResponseFormatError: If the JSON segment is not a JSON object.
    """
    cleaned = strip_wrappers(answer)
    json_part, sep, dart_part = cleaned.partition(DART_MARKER)

    try:
        entries = parse_arb(json_part)
    except ValueError as exc:
        raise ResponseFormatError(
            f"Malformed JSON in extraction response: {exc}", raw=answer
        ) from exc

    updated_source = dart_part.strip() if sep else ""
    return ExtractionResult(
        entries=entries,
        updated_source=updated_source + "\n" if updated_source else None,
    )


class ExtractionStage:
    """Runs extraction over a list of Flutter files, in order.

    Args:
        invoker: PromptInvoker used for the extraction template.
        arb_path: The source-language ARB file.
        language: The detected source language tag.
        log: Optional logger; defaults to this module's logger.
    """

    def __init__(
        self,
        invoker: PromptInvoker,
        arb_path: str | Path,
        language: str,
        log: logging.Logger | None = None,
    ) -> None:
        self._invoker = invoker
        self._arb_path = Path(arb_path)
        self._language = language
        self._log = log or logger
        self._accumulator: dict[str, Any] = {}
        self._baseline = ""

    @property
    def accumulator(self) -> dict[str, Any]:
        """Entries discovered during this run."""
        return dict(self._accumulator)

    def accumulator_json(self) -> str:
        return dump_arb(self._accumulator)

    async def run(self, files: list[str]) -> list[FileOutcome]:
        """Process *files* in order and return one outcome per file.

        Raises:
            InvalidLLMResponseError: If a reply lacks the final-answer marker
                or carries malformed JSON. Nothing is written for that file.
            ArbWriteError: If the source ARB file cannot be written.
        """
        # Read once; the accumulator is the live truth from here on.
        self._baseline = read_text_or_default(self._arb_path, "{}")
        outcomes: list[FileOutcome] = []

        for file_path in files:
            path = Path(file_path)
            if not path.is_file():
                self._log.warning("Flutter file not found, skipping: %s", file_path)
                outcomes.append(FileOutcome(path=file_path, status=FileStatus.SKIPPED))
                continue
            outcomes.append(await self._process_file(path))

        return outcomes

    async def _process_file(self, path: Path) -> FileOutcome:
        self._log.info("Extracting localizable strings from %s", path)
        content = path.read_text(encoding="utf-8")
        context = merge_json_strings(
            self._baseline, self.accumulator_json(), log=self._log
        )

        answer = await self._invoker.invoke(
            EXTRACTION_TEMPLATE,
            human={
                "arb_file": context,
                "flutter_file": content,
                "lang": self._language,
            },
        )
        result = parse_extraction_response(answer)
        self._accumulator = accumulate_entries(self._accumulator, result.entries)
        new_keys = list(result.entries)
        self._log.info("%d new entries from %s", len(new_keys), path)

        self._persist_arb()

        if result.updated_source is None:
            return FileOutcome(path=str(path), status=FileStatus.PROCESSED, new_keys=new_keys)

        try:
            atomic_write(path, result.updated_source, log=self._log)
        except OSError as exc:
            self._log.error("Could not rewrite %s: %s", path, exc)
            return FileOutcome(
                path=str(path), status=FileStatus.FAILED, new_keys=new_keys, error=str(exc)
            )
        self._log.info("Rewrote %s", path)
        return FileOutcome(path=str(path), status=FileStatus.REWRITTEN, new_keys=new_keys)

    def _persist_arb(self) -> None:
        on_disk = read_text_or_default(self._arb_path, "{}")
        merged = merge_json_strings(on_disk, self.accumulator_json(), log=self._log)
        try:
            atomic_write(self._arb_path, merged, log=self._log)
        except OSError as exc:
            raise ArbWriteError(f"Could not write {self._arb_path}: {exc}") from exc
