"""Form session: the in-memory state behind one user's form.

Holds the form state, the pending auto-fill inputs and the last generated
artifact, and exposes the three user actions (analyze, generate, reset).

Each action is single-flight: a second ``analyze`` or ``generate`` while
one of the same kind is outstanding raises ``OperationInProgressError``.
``reset`` is always allowed; it bumps the session epoch so a call that
resolves afterwards is discarded instead of landing in the fresh state.
"""

from __future__ import annotations

import logging

from metaprompt.core.config import AppSettings
from metaprompt.core.types import FieldValue
from metaprompt.exceptions import MetaPromptError, OperationInProgressError
from metaprompt.form.state import FormState
from metaprompt.generation.assembler import build_generation_request
from metaprompt.generation.classifier import classify_exception, parse_generation_result
from metaprompt.hooks.run_tracker import end_run, start_run, track_stage
from metaprompt.inference.protocols import IStructuredGenerationClient
from metaprompt.ingestion.document_text import DocumentTextExtractor
from metaprompt.models import AggregationResult, GeneratedArtifact, PartialFilesFailed, UploadedFile
from metaprompt.services.aggregation_service import InputAggregationService
from metaprompt.tasks.registry import TaskSchemaRegistry, get_registry

log = logging.getLogger(__name__)


class FormSession:
    """Single-user form controller."""

    def __init__(
        self,
        client: IStructuredGenerationClient,
        extractor: DocumentTextExtractor,
        settings: AppSettings | None = None,
        registry: TaskSchemaRegistry | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._registry = registry or get_registry()
        self._client = client
        self._aggregator = InputAggregationService(client, extractor, self._settings)

        self._state = FormState.initialize(self._registry)
        self._pending_files: list[UploadedFile] = []
        self._instruction = ""
        self._artifact: GeneratedArtifact | None = None
        self._warning: PartialFilesFailed | None = None
        self._last_error: MetaPromptError | None = None
        self._analyzing = False
        self._generating = False
        self._epoch = 0

    # ── Reads ────────────────────────────────────────────────────────

    @property
    def registry(self) -> TaskSchemaRegistry:
        return self._registry

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def pending_files(self) -> list[UploadedFile]:
        return list(self._pending_files)

    @property
    def instruction(self) -> str:
        return self._instruction

    @property
    def artifact(self) -> GeneratedArtifact | None:
        return self._artifact

    @property
    def warning(self) -> PartialFilesFailed | None:
        return self._warning

    @property
    def last_error(self) -> MetaPromptError | None:
        return self._last_error

    @property
    def is_analyzing(self) -> bool:
        return self._analyzing

    @property
    def is_generating(self) -> bool:
        return self._generating

    @property
    def can_analyze(self) -> bool:
        """Auto-fill gate: some input present and no analysis in flight."""
        has_input = bool(self._pending_files) or bool(self._instruction.strip())
        return has_input and not self._analyzing

    @property
    def can_generate(self) -> bool:
        return not self._generating

    # ── Edits ────────────────────────────────────────────────────────

    def set_field(self, field_id: str, value: FieldValue) -> None:
        self._state.set_field(field_id, value)

    def add_files(self, files: list[UploadedFile]) -> None:
        self._pending_files.extend(files)
        log.debug("Queued %d file(s), %d pending", len(files), len(self._pending_files))

    def remove_file(self, filename: str) -> bool:
        """Drop the first pending file called *filename*; False if none matched."""
        for i, upload in enumerate(self._pending_files):
            if upload.filename == filename:
                del self._pending_files[i]
                return True
        return False

    def set_instruction(self, text: str) -> None:
        self._instruction = text

    # ── Actions ──────────────────────────────────────────────────────

    async def analyze(self) -> AggregationResult:
        """Auto-fill form fields from the pending files and instruction.

        The pending inputs used by this call are consumed whatever the
        outcome.

        Raises:
            OperationInProgressError: An analysis is already running.
            InputValidationError, AllFilesFailedError, ExtractionServiceError:
                see ``InputAggregationService.aggregate``.
        """
        if self._analyzing:
            raise OperationInProgressError("An analysis is already in progress.")

        files = list(self._pending_files)
        instruction = self._instruction
        epoch = self._epoch
        task_type = self._state.task_type
        self._analyzing = True
        self._warning = None
        start_run(operation="analyze")
        status = "failed"
        try:
            result = await self._aggregator.aggregate(self._state, files, instruction)
            if epoch != self._epoch or self._state.task_type != task_type:
                log.info("Session was reset or task type changed during analysis; discarding extracted fields")
                status = "discarded"
                return result.model_copy(update={"applied": False})

            with track_stage("merge"):
                self._state.merge(result.fields)
            self._warning = result.warning
            self._last_error = None
            status = "completed"
            return result
        except MetaPromptError as exc:
            if epoch == self._epoch:
                self._last_error = exc
            raise
        finally:
            if epoch == self._epoch:
                self._consume_inputs(files, instruction)
            self._analyzing = False
            end_run(status)

    async def generate(self) -> GeneratedArtifact:
        """Assemble the request, call the backend and classify the outcome.

        A failure clears the previous artifact.

        Raises:
            OperationInProgressError: A generation is already running.
            FormIncompleteError: Required fields are blank.
            GenerationError: Any classified generation failure.
        """
        if self._generating:
            raise OperationInProgressError("A generation is already in progress.")

        request = build_generation_request(self._state, temperature=self._settings.llm.temperature)
        epoch = self._epoch
        self._generating = True
        start_run(operation="generate")
        status = "failed"
        try:
            with track_stage("generate"):
                try:
                    result = await self._client.generate(request)
                except Exception as exc:
                    raise classify_exception(exc) from exc
            with track_stage("classify"):
                artifact = parse_generation_result(result)
        except MetaPromptError as exc:
            log.warning("Generation failed (%s): %s", exc.error_code, exc.message)
            if epoch == self._epoch:
                self._artifact = None
                self._last_error = exc
            raise
        else:
            if epoch != self._epoch:
                log.info("Session was reset during generation; discarding artifact")
                status = "discarded"
            else:
                self._artifact = artifact
                self._last_error = None
                status = "completed"
            return artifact
        finally:
            self._generating = False
            end_run(status)

    def reset(self) -> None:
        """Fresh form state, no pending inputs, no artifact."""
        self._state = FormState.initialize(self._registry)
        self._pending_files = []
        self._instruction = ""
        self._artifact = None
        self._warning = None
        self._last_error = None
        self._epoch += 1
        log.info("Form session reset")

    # ── Internal helpers ────────────────────────────────────────────

    def _consume_inputs(self, files: list[UploadedFile], instruction: str) -> None:
        used = {id(f) for f in files}
        self._pending_files = [f for f in self._pending_files if id(f) not in used]
        if self._instruction == instruction:
            self._instruction = ""

