"""Input aggregation service: uploaded files + instruction → extracted form fields.

Pipeline:

1. convert every file concurrently and wait for all of them to settle;
2. abort with ``AllFilesFailedError`` when every file failed;
3. pick the extraction strategy from the inputs present;
4. run it against the selected task type's extraction schema;
5. merge the result into form state (``run`` only; ``aggregate`` leaves the
   merge to the caller);
6. report partial conversion failures as a non-fatal warning.

Strategy failures surface as ``ExtractionServiceError`` and nothing is merged.
"""

from __future__ import annotations

import asyncio
import logging

from metaprompt.core.config import AppSettings
from metaprompt.exceptions import AllFilesFailedError, DocumentConversionError, InputValidationError
from metaprompt.extraction.strategies import ExtractionTarget, select_strategy
from metaprompt.form.state import FormState
from metaprompt.hooks.run_tracker import track_stage
from metaprompt.inference.protocols import IStructuredGenerationClient
from metaprompt.ingestion.document_text import DocumentTextExtractor
from metaprompt.models import AggregationResult, PartialFilesFailed, UploadedFile

log = logging.getLogger(__name__)

DOCUMENT_BOUNDARY = "\n\n--- End of Document ---\n\n"


def format_document_block(filename: str, text: str) -> str:
    return f"--- Document: {filename} ---\n{text}"


class InputAggregationService:
    """Combine documents and an instruction into one extraction call."""

    def __init__(
        self,
        client: IStructuredGenerationClient,
        extractor: DocumentTextExtractor,
        settings: AppSettings | None = None,
    ) -> None:
        self._client = client
        self._extractor = extractor
        self._settings = settings or AppSettings()

    async def convert_files(
        self,
        files: list[UploadedFile],
    ) -> tuple[list[tuple[str, str]], list[DocumentConversionError]]:
        """Convert *files* concurrently.

        Returns ``(successes, failures)``; successes are ``(filename, text)``
        pairs in upload order whatever order the conversions finished in.
        """
        sem = asyncio.Semaphore(self._settings.extraction.max_concurrent_conversions)

        async def _bounded(upload: UploadedFile) -> str:
            async with sem:
                return await self._extractor.extract(upload)

        # All-settled barrier: gather keeps input order
        outcomes = await asyncio.gather(*[_bounded(f) for f in files], return_exceptions=True)

        successes: list[tuple[str, str]] = []
        failures: list[DocumentConversionError] = []
        for upload, outcome in zip(files, outcomes):
            if isinstance(outcome, DocumentConversionError):
                failures.append(outcome)
            elif isinstance(outcome, Exception):
                failures.append(DocumentConversionError(upload.filename, str(outcome) or type(outcome).__name__))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                successes.append((upload.filename, self._cap(outcome, upload.filename)))

        for failure in failures:
            log.warning("Document conversion failed: %s", failure.message)
        return successes, failures

    def build_document_text(self, successes: list[tuple[str, str]]) -> str:
        """Labelled blocks joined by the document boundary marker."""
        text = DOCUMENT_BOUNDARY.join(format_document_block(name, body) for name, body in successes)
        return self._cap(text, "combined documents")

    async def aggregate(
        self,
        state: FormState,
        files: list[UploadedFile],
        instruction: str = "",
    ) -> AggregationResult:
        """Run conversion and extraction without touching *state*.

        Raises:
            InputValidationError: No task type, or neither files nor instruction.
            AllFilesFailedError: Every supplied file failed to convert.
            ExtractionServiceError: The extraction call failed.
        """
        task_type = state.task_type
        if task_type is None:
            raise InputValidationError("Select a task type before using auto-fill.")
        if not files and not instruction.strip():
            raise InputValidationError("Upload at least one file or write an instruction.")

        document_text = ""
        warning: PartialFilesFailed | None = None
        converted: list[str] = []

        if files:
            with track_stage("convert_documents") as stage:
                successes, failures = await self.convert_files(files)
                stage.success_count = len(successes)
                stage.failure_count = len(failures)

            if not successes:
                raise AllFilesFailedError([f.filename for f in failures])
            if failures:
                warning = PartialFilesFailed(
                    filenames=[f.filename for f in failures],
                    causes={f.filename: f.cause for f in failures},
                )
            converted = [name for name, _ in successes]
            document_text = self.build_document_text(successes)

        target = ExtractionTarget(document_text=document_text, instruction_text=instruction)
        strategy = select_strategy(target)
        registry = state.registry
        schema = registry.extraction_schema(task_type)

        with track_stage("extract") as stage:
            fields = await strategy.run(
                self._client,
                schema,
                target,
                task_label=registry.get(task_type).display_name,
                temperature=self._settings.llm.extraction_temperature,
            )
            stage.success_count = 1

        log.info(
            "Auto-fill via %s filled %d/%d field(s)",
            strategy.name.value,
            sum(1 for v in fields.values() if v),
            len(fields),
        )
        return AggregationResult(
            strategy=strategy.name,
            fields=fields,
            converted_files=converted,
            warning=warning,
        )

    async def run(
        self,
        state: FormState,
        files: list[UploadedFile],
        instruction: str = "",
    ) -> AggregationResult:
        """``aggregate`` then merge the extracted fields into *state*."""
        result = await self.aggregate(state, files, instruction)
        state.merge(result.fields)
        return result

    def _cap(self, text: str, label: str) -> str:
        limit = self._settings.extraction.max_document_chars
        if len(text) <= limit:
            return text
        log.warning("Truncating %s from %d to %d chars", label, len(text), limit)
        return text[:limit]
