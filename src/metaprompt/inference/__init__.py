"""Structured generation backends."""

from __future__ import annotations

from metaprompt.inference.client import LiteLLMGenerationClient
from metaprompt.inference.protocols import (
    GenerationRequest,
    GenerationResult,
    IStructuredGenerationClient,
)

__all__ = [
    "GenerationRequest",
    "GenerationResult",
    "IStructuredGenerationClient",
    "LiteLLMGenerationClient",
]
