"""Merging ARB documents.

Two merge directions are used during a run and they are deliberately kept as
separate functions:

* :func:`merge_json_strings` merges a candidate into what is on disk. Keys
  already on disk win, so an extraction or translation never clobbers an
  entry a human may have edited.
* :func:`accumulate_entries` folds freshly extracted entries into the
  in-memory accumulator. Here the newly parsed entries win.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

ARB_INDENT = 2


def dump_arb(document: dict[str, Any]) -> str:
    """Serialize an ARB document with stable, human-readable formatting."""
    return json.dumps(document, indent=ARB_INDENT, ensure_ascii=False)


def parse_arb(text: str | None) -> dict[str, Any]:
    """Parse ARB text into a dict. Empty or blank text is ``{}``.

    Raises:
        ValueError: If the text is not valid JSON or not a JSON object
            (``json.JSONDecodeError`` is a ``ValueError``).
    """
    if not text or not text.strip():
        return {}
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def merge_json_strings(
    existing_json: str,
    new_json: str,
    *,
    log: logging.Logger | None = None,
) -> str:
    """Merge *new_json* into *existing_json*; existing values win.

    The result holds every key of both documents. Keys from *new_json* come
    first in their original order, followed by keys only present in
    *existing_json*.

    If either input cannot be parsed, *existing_json* is returned unchanged so
    the file already on disk is never lost because of a bad candidate.
    """
    log = log or logger
    try:
        existing = parse_arb(existing_json)
        new = parse_arb(new_json)
    except ValueError as exc:
        log.error("JSON merge failed, keeping existing content: %s", exc)
        return existing_json

    merged = {**new, **existing}
    return dump_arb(merged)


def accumulate_entries(
    accumulator: dict[str, Any],
    entries: dict[str, Any],
) -> dict[str, Any]:
    """Return the accumulator with *entries* folded in; *entries* win."""
    return {**accumulator, **entries}
