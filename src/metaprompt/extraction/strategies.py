"""Auto-fill extraction strategies.

Three request shapes, chosen by which inputs are present:

========================  ===============  =====================
Strategy                  Document text    Instruction text
========================  ===============  =====================
``document_only``         yes              no
``combined``              yes              yes (primary intent)
``idea_expansion``        no               yes (expanded)
========================  ===============  =====================

Every strategy targets the extraction schema of the selected task type and
returns a value for every schema field (``""`` when undetermined).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from metaprompt.core.types import ExtractedFields
from metaprompt.exceptions import ExtractionServiceError
from metaprompt.generation.classifier import classify_exception, classify_stop
from metaprompt.inference.protocols import GenerationRequest, IStructuredGenerationClient
from metaprompt.models import ExtractionStrategyName
from metaprompt.prompts.registry import get_prompt
from metaprompt.tasks.registry import ExtractionSchema

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionTarget:
    """Inputs for one extraction call; which ones are set selects the strategy."""

    document_text: str = ""
    instruction_text: str = ""

    @property
    def has_documents(self) -> bool:
        return bool(self.document_text.strip())

    @property
    def has_instruction(self) -> bool:
        return bool(self.instruction_text.strip())


@dataclass(frozen=True)
class ExtractionStrategy:
    """One extraction request shape."""

    name: ExtractionStrategyName
    prompt_name: str
    uses_documents: bool
    uses_instruction: bool

    def build_request(
        self,
        schema: ExtractionSchema,
        target: ExtractionTarget,
        *,
        task_label: str,
        temperature: float | None = None,
    ) -> GenerationRequest:
        if self.uses_documents != target.has_documents or self.uses_instruction != target.has_instruction:
            raise ValueError(
                f"Strategy {self.name.value!r} does not accept target "
                f"(documents={target.has_documents}, instruction={target.has_instruction})"
            )
        field_list = "\n".join(f"- {fid}: {desc}" for fid, desc in schema.fields.items())
        prompt = get_prompt("extraction", self.prompt_name).format(
            task_label=task_label,
            field_list=field_list,
            document_text=target.document_text,
            instruction_text=target.instruction_text.strip(),
        )
        return GenerationRequest(
            system_instruction=get_prompt("extraction", "EXTRACTION_SYSTEM_PROMPT"),
            user_payload=prompt,
            output_schema=schema.json_schema(),
            schema_name=f"{schema.task_type.value}_extraction",
            temperature=temperature,
        )

    async def run(
        self,
        client: IStructuredGenerationClient,
        schema: ExtractionSchema,
        target: ExtractionTarget,
        *,
        task_label: str,
        temperature: float | None = None,
    ) -> ExtractedFields:
        """Call the generation client and return one string per schema field.

        Raises:
            ExtractionServiceError: The call failed, came back empty, or the
                result does not fit the schema.
        """
        request = self.build_request(schema, target, task_label=task_label, temperature=temperature)
        log.info("Running %s extraction for %s", self.name.value, schema.task_type.value)

        try:
            result = await client.generate(request)
        except Exception as exc:
            cause = classify_exception(exc)
            raise ExtractionServiceError(f"Extraction failed: {cause.message}", cause) from exc

        if not result.text.strip():
            cause = classify_stop(result)
            raise ExtractionServiceError(f"Extraction failed: {cause.message}", cause)

        return parse_extracted_fields(result.text, schema)


def parse_extracted_fields(text: str, schema: ExtractionSchema) -> ExtractedFields:
    """Parse *text* as a JSON object and coerce it onto *schema*.

    Missing and null fields become ``""``; keys outside the schema are
    dropped.  Any other non-string value is a schema mismatch.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ExtractionServiceError(f"Extraction returned unparsable JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ExtractionServiceError(
            f"Extraction returned {type(data).__name__}, expected a JSON object"
        )

    fields: ExtractedFields = {}
    for fid in schema.field_ids:
        value = data.get(fid)
        if value is None:
            fields[fid] = ""
        elif isinstance(value, str):
            fields[fid] = value
        else:
            raise ExtractionServiceError(
                f"Extraction field {fid!r} is {type(value).__name__}, expected string"
            )

    extra = sorted(set(data) - set(schema.field_ids))
    if extra:
        log.warning("Dropping extraction keys outside the schema: %s", extra)
    return fields


DOCUMENT_ONLY = ExtractionStrategy(
    name=ExtractionStrategyName.DOCUMENT_ONLY,
    prompt_name="DOCUMENT_ONLY_PROMPT",
    uses_documents=True,
    uses_instruction=False,
)
COMBINED = ExtractionStrategy(
    name=ExtractionStrategyName.COMBINED,
    prompt_name="COMBINED_PROMPT",
    uses_documents=True,
    uses_instruction=True,
)
IDEA_EXPANSION = ExtractionStrategy(
    name=ExtractionStrategyName.IDEA_EXPANSION,
    prompt_name="IDEA_EXPANSION_PROMPT",
    uses_documents=False,
    uses_instruction=True,
)


def select_strategy(target: ExtractionTarget) -> ExtractionStrategy:
    """Pick the strategy matching the inputs present in *target*.

    Raises:
        ValueError: Neither documents nor an instruction are present.
    """
    if target.has_documents and target.has_instruction:
        return COMBINED
    if target.has_documents:
        return DOCUMENT_ONLY
    if target.has_instruction:
        return IDEA_EXPANSION
    raise ValueError("Extraction target has neither document text nor instruction text")
