"""Document-to-text conversion for uploaded files."""

from __future__ import annotations

from metaprompt.ingestion.document_text import (
    SUPPORTED_EXTENSIONS,
    DefaultDocumentTextExtractor,
    DocumentTextExtractor,
)

__all__ = ["SUPPORTED_EXTENSIONS", "DefaultDocumentTextExtractor", "DocumentTextExtractor"]
