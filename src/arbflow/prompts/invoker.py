"""Template-driven LLM invocation with final-answer extraction.

Every prompt asks the model to reason freely and then write its answer after
the literal marker ``REPONSE FINALE :``. The marker is the contract between
the templates and this module; everything before it is discarded.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from arbflow.core.errors import InvalidLLMResponseError
from arbflow.llm.client import LLMClient
from arbflow.prompts.store import PromptStore

logger = logging.getLogger(__name__)

FINAL_ANSWER_MARKER = "REPONSE FINALE :"

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def _substitute(template: str, substitutions: Mapping[str, str]) -> str:
    """Fill the first occurrence of each placeholder in a single pass.

    Inserted values are never rescanned, so a ``{lang}`` inside Dart or ARB
    content is left as it is.
    """
    filled: set[str] = set()

    def fill(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in substitutions and name not in filled:
            filled.add(name)
            return substitutions[name]
        return match.group(0)

    return _PLACEHOLDER.sub(fill, template)


def extract_final_answer(raw: str, *, last: bool = False) -> str:
    """Return the trimmed text after the final-answer marker.

    With ``last=True`` the text after the last occurrence is used; providers
    sometimes echo the marker while reasoning before the real answer.

    Raises:
        InvalidLLMResponseError: If the marker is absent.
    """
    parts = raw.split(FINAL_ANSWER_MARKER)
    if len(parts) < 2:
        raise InvalidLLMResponseError(f"Invalid LLM response: {raw}", raw=raw)
    answer = parts[-1] if last else parts[1]
    return answer.strip()


class PromptInvoker:
    """Loads a template pair, fills its placeholders and calls the LLM.

    Args:
        client: The LLM capability to call.
        store: Where template pairs come from.
        log: Optional logger; defaults to this module's logger.
    """

    def __init__(
        self,
        client: LLMClient,
        store: PromptStore | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._store = store or PromptStore()
        self._log = log or logger

    async def invoke(
        self,
        template_name: str,
        *,
        system: Mapping[str, str] | None = None,
        human: Mapping[str, str] | None = None,
        last_marker: bool = False,
    ) -> str:
        """Run template *template_name* and return its final answer.

        *system* and *human* map placeholder names (without braces) to the
        values substituted into the respective half. Each placeholder is
        replaced once.
        """
        template = self._store.load(template_name)
        sys_prompt = _substitute(template.system, system or {})
        hum_prompt = _substitute(template.human, human or {})

        self._log.debug("Calling LLM with template %r", template_name)
        raw = await self._client.generate(hum_prompt, system_prompt=sys_prompt)
        return extract_final_answer(raw, last=last_marker)
