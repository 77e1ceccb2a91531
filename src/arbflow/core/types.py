"""Result models shared across arbflow modules."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class FileStatus(StrEnum):
    """Outcome of processing a single Flutter source file."""

    PROCESSED = "processed"
    REWRITTEN = "rewritten"
    SKIPPED = "skipped"
    FAILED = "failed"


class ExtractionResult(BaseModel):
    """Parsed extraction answer: new ARB entries plus optional new source."""

    entries: dict[str, Any] = Field(default_factory=dict)
    updated_source: str | None = None


class FileOutcome(BaseModel):
    """What happened to one Flutter file during extraction."""

    path: str
    status: FileStatus
    new_keys: list[str] = Field(default_factory=list)
    error: str | None = None


class RunReport(BaseModel):
    """Summary of a full localization run."""

    source_language: str = ""
    candidate_languages: list[str] = Field(default_factory=list)
    files: list[FileOutcome] = Field(default_factory=list)
    new_keys: list[str] = Field(default_factory=list)
    translated_languages: list[str] = Field(default_factory=list)

    def files_with_status(self, status: FileStatus) -> list[str]:
        return [f.path for f in self.files if f.status == status]

    def summary(self) -> dict[str, Any]:
        return {
            "source_language": self.source_language,
            "candidates": self.candidate_languages,
            "new_keys": len(self.new_keys),
            "processed": len(self.files_with_status(FileStatus.PROCESSED))
            + len(self.files_with_status(FileStatus.REWRITTEN)),
            "rewritten": len(self.files_with_status(FileStatus.REWRITTEN)),
            "skipped": len(self.files_with_status(FileStatus.SKIPPED)),
            "failed": len(self.files_with_status(FileStatus.FAILED)),
            "translated": self.translated_languages,
        }


class HealthStatus(BaseModel):
    """Health check response for the configured LLM provider."""

    service: str
    healthy: bool
    latency_ms: float | None = None
    details: dict[str, Any] = Field(default_factory=dict)
