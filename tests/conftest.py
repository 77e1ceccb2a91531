"""Shared test fixtures and helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest

from arbflow.core.config import LLMConfig
from arbflow.llm.client import LLMClient
from arbflow.prompts.store import PromptStore

MARKER = "REPONSE FINALE :"

TEMPLATES = {
    "chooseLanguage": ("CHOOSE among {langs}", "{doc}"),
    "process": ("PROCESS", "ARB={arb_file}\nDART={flutter_file}\nLANG={lang}"),
    "amendArb": ("TRANSLATE", "{lang_tag}\n{input}"),
}


class FakeLLMClient(LLMClient):
    """Scripted LLM: ``responder(system, human)`` returns the raw reply."""

    def __init__(self, responder: Callable[[str, str], str]) -> None:
        super().__init__(LLMConfig(provider="openai", model="fake"))
        self._responder = responder
        self.calls: list[tuple[str, str]] = []

    async def chat(self, messages, *, temperature=None) -> str:
        system = next((m["content"] for m in messages if m["role"] == "system"), "")
        human = messages[-1]["content"]
        self.calls.append((system, human))
        return self._responder(system, human)

    async def is_available(self) -> bool:
        return True

    def calls_for(self, prefix: str) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0].startswith(prefix)]


def final(answer: str) -> str:
    return f"Let me think about it.\n{MARKER} {answer}"


def scripted(
    language: str = "en",
    entries: dict | None = None,
    dart: str | None = None,
    translations: dict[str, dict] | None = None,
) -> Callable[[str, str], str]:
    """Build a responder that answers each template in a fixed way."""

    def responder(system: str, human: str) -> str:
        if system.startswith("CHOOSE"):
            return final(language)
        if system.startswith("PROCESS"):
            body = f"<JSON>{json.dumps(entries or {})}</JSON>"
            if dart is not None:
                body += f"\n<dart>\n{dart}\n</dart>"
            return final(body)
        if system.startswith("TRANSLATE"):
            tag = human.splitlines()[0]
            return final(json.dumps((translations or {}).get(tag, {})))
        raise AssertionError(f"Unexpected prompt: {system!r}")

    return responder


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "prompts"
    directory.mkdir()
    for name, (system, human) in TEMPLATES.items():
        (directory / f"{name}.sys").write_text(system, encoding="utf-8")
        (directory / f"{name}.hum").write_text(human, encoding="utf-8")
    return directory


@pytest.fixture
def prompt_store(prompts_dir: Path) -> PromptStore:
    return PromptStore(prompts_dir)


@pytest.fixture
def arb_folder(tmp_path: Path) -> Path:
    folder = tmp_path / "l10n"
    folder.mkdir()
    (folder / "app_en.arb").write_text(json.dumps({"greeting": "Hi"}), encoding="utf-8")
    (folder / "app_fr.arb").write_text("{}", encoding="utf-8")
    return folder


@pytest.fixture
def dart_file(tmp_path: Path) -> Path:
    path = tmp_path / "main.dart"
    path.write_text("Text('Bye')\n", encoding="utf-8")
    return path


def read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))
