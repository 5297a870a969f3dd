"""Structured generation protocol: the contract every generation backend implements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

# Normalised stop reasons
FINISH_STOP = "STOP"
FINISH_SAFETY = "SAFETY"
FINISH_RECITATION = "RECITATION"
FINISH_MAX_TOKENS = "MAX_TOKENS"


@dataclass(frozen=True)
class GenerationRequest:
    """A single structured generation call.

    ``output_schema`` is a JSON schema the response text must conform to.
    ``temperature`` of ``None`` means the client's configured default.
    """

    system_instruction: str
    user_payload: str
    output_schema: dict[str, Any]
    schema_name: str = "structured_output"
    temperature: float | None = None


@dataclass
class GenerationResult:
    """Raw outcome of a generation call, before classification.

    ``text`` is empty when the backend produced nothing; ``finish_reason``
    then says why (``SAFETY``, ``RECITATION``, ``MAX_TOKENS`` or a provider
    reason), or is empty when none was given.
    """

    text: str = ""
    finish_reason: str = ""
    blocked_categories: list[str] = field(default_factory=list)
    usage: dict[str, int] = field(default_factory=dict)


@runtime_checkable
class IStructuredGenerationClient(Protocol):
    """Protocol for structured generation backends.

    Transport and service failures are raised as-is; turning them into the
    error taxonomy is the classifier's job.
    """

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Run one generation call.

        Args:
            request: System instruction, user payload and output schema.

        Returns:
            GenerationResult with the response text and stop metadata.
        """
        ...
