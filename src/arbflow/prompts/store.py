"""Prompt template loader for ``<name>.sys`` / ``<name>.hum`` pairs."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from arbflow.core.errors import PromptTemplateError

_DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

SYSTEM_SUFFIX = ".sys"
HUMAN_SUFFIX = ".hum"


class PromptTemplate(BaseModel):
    """A named pair of system and human prompt texts."""

    name: str
    system: str
    human: str


class PromptStore:
    """Loads prompt template pairs from a directory.

    Template contents are immutable for the duration of a run, so each pair is
    read once and cached.
    """

    def __init__(self, templates_dir: str | Path | None = None) -> None:
        self._templates_dir = Path(templates_dir) if templates_dir else _DEFAULT_TEMPLATES_DIR
        self._cache: dict[str, PromptTemplate] = {}

    @property
    def templates_dir(self) -> Path:
        return self._templates_dir

    def load(self, name: str) -> PromptTemplate:
        """Return the template pair called *name*.

        Raises:
            PromptTemplateError: If either half is missing or unreadable.
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        sys_path = self._templates_dir / f"{name}{SYSTEM_SUFFIX}"
        hum_path = self._templates_dir / f"{name}{HUMAN_SUFFIX}"
        try:
            template = PromptTemplate(
                name=name,
                system=sys_path.read_text(encoding="utf-8"),
                human=hum_path.read_text(encoding="utf-8"),
            )
        except OSError as exc:
            raise PromptTemplateError(
                f"Prompt {name!r} missing: {sys_path} or {hum_path}"
            ) from exc

        self._cache[name] = template
        return template
