"""Extraction and translation stages, and the processor that runs them."""

from arbflow.pipeline.extraction import ExtractionStage, parse_extraction_response
from arbflow.pipeline.processor import L10nProcessor
from arbflow.pipeline.translation import TranslationStage

__all__ = [
    "ExtractionStage",
    "L10nProcessor",
    "TranslationStage",
    "parse_extraction_response",
]
