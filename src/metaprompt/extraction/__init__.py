"""Extraction strategies used by auto-fill."""

from __future__ import annotations

from metaprompt.extraction.strategies import (
    COMBINED,
    DOCUMENT_ONLY,
    IDEA_EXPANSION,
    ExtractionStrategy,
    ExtractionTarget,
    parse_extracted_fields,
    select_strategy,
)

__all__ = [
    "COMBINED",
    "DOCUMENT_ONLY",
    "IDEA_EXPANSION",
    "ExtractionStrategy",
    "ExtractionTarget",
    "parse_extracted_fields",
    "select_strategy",
]
