"""Prompt templates and the final-answer invocation contract."""

from arbflow.prompts.invoker import FINAL_ANSWER_MARKER, PromptInvoker, extract_final_answer
from arbflow.prompts.store import PromptStore, PromptTemplate

__all__ = [
    "FINAL_ANSWER_MARKER",
    "PromptInvoker",
    "PromptStore",
    "PromptTemplate",
    "extract_final_answer",
]
