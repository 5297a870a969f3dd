"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metaprompt.core.config import AppSettings

log = logging.getLogger(__name__)

# LiteLLM prefixes for locally served models that need no API key
_NO_KEY_PREFIXES = ("ollama/", "ollama_chat/")


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_limits(settings)


def _check_api_key(settings: AppSettings) -> None:
    """Reject an empty API key for hosted providers."""
    if settings.llm.model.startswith(_NO_KEY_PREFIXES):
        return
    if not settings.llm.api_key.strip():
        raise ValueError(
            f"METAPROMPT_LLM_API_KEY is required for model '{settings.llm.model}'. "
            "Set it via environment variable or secrets manager."
        )


def _check_limits(settings: AppSettings) -> None:
    """Warn when uploads can exceed what extraction will keep."""
    if settings.api.max_upload_bytes < settings.extraction.max_document_chars:
        log.warning(
            "METAPROMPT_API_MAX_UPLOAD_BYTES (%d) is below "
            "METAPROMPT_EXTRACTION_MAX_DOCUMENT_CHARS (%d); large documents will be rejected "
            "before they can be truncated.",
            settings.api.max_upload_bytes,
            settings.extraction.max_document_chars,
        )
