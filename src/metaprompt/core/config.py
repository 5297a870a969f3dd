"""Nested pydantic-settings configuration for the application.

Each group reads its own ``METAPROMPT_<GROUP>_*`` env vars::

    export METAPROMPT_LLM_MODEL=gemini/gemini-2.5-flash
    export METAPROMPT_LLM_API_KEY=...
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """Structured generation backend configuration.

    Env vars use ``METAPROMPT_LLM_`` prefix.  ``model`` accepts any LiteLLM
    model string; the default targets Gemini through its public API.
    """

    model_config = {"env_prefix": "METAPROMPT_LLM_"}

    model: str = "gemini/gemini-2.5-flash"
    api_key: str = ""
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    extraction_temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    timeout: float = 120.0
    max_output_tokens: int | None = None


class ExtractionConfig(BaseSettings):
    """Auto-fill (document / idea extraction) configuration.

    Env vars use ``METAPROMPT_EXTRACTION_`` prefix.
    """

    model_config = {"env_prefix": "METAPROMPT_EXTRACTION_"}

    max_document_chars: int = Field(default=60_000, gt=0)
    max_concurrent_conversions: int = Field(default=8, ge=1)


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``METAPROMPT_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "METAPROMPT_OBSERVABILITY_"}

    service_name: str = "metaprompt"
    log_level: str = "INFO"


class APIConfig(BaseSettings):
    """HTTP surface metadata.

    Env vars use ``METAPROMPT_API_`` prefix.
    """

    model_config = {"env_prefix": "METAPROMPT_API_"}

    title: str = "Meta-Prompt Generator"
    description: str = (
        "Task-adaptive form back-end that assembles user input and synthesizes "
        "meta-prompts through a structured generation model."
    )
    max_upload_bytes: int = Field(default=20 * 1024 * 1024, gt=0)


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    llm: LLMConfig = LLMConfig()
    extraction: ExtractionConfig = ExtractionConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
    api: APIConfig = APIConfig()
