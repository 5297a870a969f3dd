"""Pydantic data models for metaprompt.

Static form descriptors live in ``metaprompt.tasks.fields`` as frozen
dataclasses; the models here are the values that flow through the pipeline
and out over the API.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ── Uploaded input ───────────────────────────────────────────────────


class UploadedFile(BaseModel):
    """An uploaded document awaiting conversion to text."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes = Field(repr=False)

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot, or ``""``."""
        _, dot, ext = self.filename.rpartition(".")
        return ext.lower() if dot else ""


# ── Generated output ─────────────────────────────────────────────────


class GeneratedArtifact(BaseModel):
    """The eight-part meta-prompt deliverable.

    The model emits camelCase keys (``mainPrompt``, ``variantA`` ...); both
    spellings are accepted on input.  ``ui_spec`` is itself a stringified JSON
    document whose structure depends on the task type and is never parsed here.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    summary: str
    techniques: str
    main_prompt: str
    variant_a: str
    variant_b: str
    ui_spec: str
    checklist: str
    example: str


# ── Aggregation results ──────────────────────────────────────────────


class ExtractionStrategyName(str, Enum):
    """Which of the three request shapes an auto-fill call used."""

    DOCUMENT_ONLY = "document_only"
    COMBINED = "combined"
    IDEA_EXPANSION = "idea_expansion"


class PartialFilesFailed(BaseModel):
    """Non-fatal warning: some, but not all, uploaded files failed to convert."""

    error_code: str = "partial_files_failed"
    filenames: list[str] = Field(default_factory=list)
    causes: dict[str, str] = Field(default_factory=dict)

    @property
    def message(self) -> str:
        return "Some files could not be processed: " + ", ".join(self.filenames)


class AggregationResult(BaseModel):
    """Outcome of a successful auto-fill run."""

    strategy: ExtractionStrategyName
    fields: dict[str, str] = Field(default_factory=dict)
    converted_files: list[str] = Field(default_factory=list)
    warning: Optional[PartialFilesFailed] = None
    # False when the session was reset while the call was in flight
    applied: bool = True


# ── Run analytics ────────────────────────────────────────────────────


class StageMetrics(BaseModel):
    """Timing for one named stage of a run."""

    stage: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_ms: float = 0.0
    success_count: int = 0
    failure_count: int = 0


class RunAnalytics(BaseModel):
    """Per-operation analytics gathered by ``hooks.run_tracker``."""

    run_id: str
    operation: str = ""
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: Optional[datetime] = None
    status: str = "running"
    total_duration_ms: float = 0.0
    stages: list[StageMetrics] = Field(default_factory=list)

    def finalize(self, status: str = "completed") -> None:
        self.ended_at = datetime.now(timezone.utc)
        self.total_duration_ms = (self.ended_at - self.started_at).total_seconds() * 1000
        if self.status == "running":
            self.status = status
