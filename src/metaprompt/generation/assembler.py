"""Request assembler: form state → task-conditioned generation request."""

from __future__ import annotations

import logging
from typing import Any

from metaprompt.core.types import FieldValue
from metaprompt.exceptions import FormIncompleteError
from metaprompt.form.state import FormState
from metaprompt.inference.protocols import GenerationRequest
from metaprompt.models import GeneratedArtifact
from metaprompt.prompts.registry import get_prompt
from metaprompt.tasks.fields import TASK_TYPE_FIELD, FieldDescriptor, FieldKind

log = logging.getLogger(__name__)

NOT_SPECIFIED = "Tidak ditentukan"
ARTIFACT_SCHEMA_NAME = "generated_artifact"


def artifact_output_schema() -> dict[str, Any]:
    """JSON schema requiring exactly the eight artifact fields, camelCase keys."""
    return GeneratedArtifact.model_json_schema(by_alias=True)


def build_generation_request(
    state: FormState,
    *,
    temperature: float | None = None,
) -> GenerationRequest:
    """Build the generation request for the current form.

    Raises:
        FormIncompleteError: No task type is selected or visible required
            fields are blank.
    """
    if state.task_type is None:
        raise FormIncompleteError([TASK_TYPE_FIELD])
    missing = state.missing_required()
    if missing:
        raise FormIncompleteError(missing)

    payload = assemble_user_payload(state)
    log.debug("Assembled %s payload (%d chars)", state.task_type.value, len(payload))
    return GenerationRequest(
        system_instruction=get_prompt("generation", "GENERATION_SYSTEM_PROMPT"),
        user_payload=payload,
        output_schema=artifact_output_schema(),
        schema_name=ARTIFACT_SCHEMA_NAME,
        temperature=temperature,
    )


def assemble_user_payload(state: FormState) -> str:
    """List task type, the active task's fields and the preferences.

    Fields of other task types are never included.  A hidden preference
    (``citation_style`` without ``need_citations``) is left out; every other
    listed field appears, blank ones as ``Tidak ditentukan``.
    """
    task_type = state.task_type
    if task_type is None:
        raise FormIncompleteError([TASK_TYPE_FIELD])
    registry = state.registry
    definition = registry.get(task_type)

    lines = [
        get_prompt("generation", "GENERATION_PAYLOAD_HEADER"),
        "",
        f"* **{TASK_TYPE_FIELD}**: {task_type.value} ({definition.display_name})",
    ]
    for fid in registry.task_specific_fields(task_type):
        lines.append(_line(registry.get_field(fid), state.get(fid)))
    for fid in registry.preference_fields:
        descriptor = registry.get_field(fid)
        if not state.visible(descriptor):
            continue
        lines.append(_line(descriptor, state.get(fid)))
    lines += ["", get_prompt("generation", "GENERATION_PAYLOAD_FOOTER")]
    return "\n".join(lines)


def _line(descriptor: FieldDescriptor, value: FieldValue) -> str:
    return f"* **{descriptor.id}**: {_render(descriptor, value)}"


def _render(descriptor: FieldDescriptor, value: FieldValue) -> str:
    kind = descriptor.kind
    if kind is FieldKind.CHECKBOX:
        items = list(value) if isinstance(value, list) else []
        return f"[{', '.join(items)}]" if items else NOT_SPECIFIED
    if kind is FieldKind.TOGGLE:
        return "true" if value is True else "false"
    if kind in (FieldKind.TEXT, FieldKind.TEXTAREA, FieldKind.SELECT, FieldKind.RADIO, FieldKind.BUTTONS):
        text = str(value).strip() if isinstance(value, str) else ""
        return text or NOT_SPECIFIED
    raise AssertionError(f"Unhandled field kind: {kind!r}")
