"""Generation request assembly and response classification."""

from __future__ import annotations

from metaprompt.generation.assembler import (
    NOT_SPECIFIED,
    artifact_output_schema,
    assemble_user_payload,
    build_generation_request,
)
from metaprompt.generation.classifier import (
    classify_exception,
    classify_stop,
    parse_generation_result,
)

__all__ = [
    "NOT_SPECIFIED",
    "artifact_output_schema",
    "assemble_user_payload",
    "build_generation_request",
    "classify_exception",
    "classify_stop",
    "parse_generation_result",
]
