"""Task schema registry.

Maps each task type to its form steps, its task-specific fields and its
extraction schema.  The table is static configuration loaded once from
``metaprompt.tasks.catalog``; every other component consults it rather than
keeping its own copy of field lists.

Usage::

    from metaprompt.tasks.registry import get_registry

    registry = get_registry()
    schema = registry.extraction_schema(TaskType.AGENT)
    print(schema.field_ids)   # ('agent_goal', 'agent_context', ...)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from metaprompt.tasks.fields import TASK_TYPE_FIELD, FieldDescriptor, StepDescriptor, TaskType

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskDefinition:
    """Manifest for one task type.

    ``extraction_fields`` maps field id → description used in extraction
    prompts; its key order is the schema's field order.
    """

    task_type: TaskType
    display_name: str
    description: str = ""
    step_id: str = ""
    extraction_fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ExtractionSchema:
    """Fixed set of required string fields an extraction call must return."""

    task_type: TaskType
    fields: dict[str, str]

    @property
    def field_ids(self) -> tuple[str, ...]:
        return tuple(self.fields)

    def json_schema(self) -> dict[str, Any]:
        """JSON schema requiring every field as a string and nothing else."""
        return {
            "type": "object",
            "properties": {
                fid: {"type": "string", "description": desc}
                for fid, desc in self.fields.items()
            },
            "required": list(self.fields),
            "additionalProperties": False,
        }


class TaskSchemaRegistry:
    """Registry of form steps and task definitions."""

    def __init__(
        self,
        steps: tuple[StepDescriptor, ...] | list[StepDescriptor] = (),
        preference_fields: tuple[str, ...] = (),
    ) -> None:
        self._steps: tuple[StepDescriptor, ...] = tuple(steps)
        self._preference_fields = tuple(preference_fields)
        self._fields: dict[str, FieldDescriptor] = {}
        self._field_step: dict[str, StepDescriptor] = {}
        self._tasks: dict[TaskType, TaskDefinition] = {}

        for step in self._steps:
            for fd in step.fields:
                if fd.id in self._fields:
                    raise ValueError(f"Duplicate field id {fd.id!r} in step {step.id!r}")
                self._fields[fd.id] = fd
                self._field_step[fd.id] = step

        unknown = [fid for fid in self._preference_fields if fid not in self._fields]
        if unknown:
            raise ValueError(f"Preference fields not in any step: {unknown}")

    def register(self, definition: TaskDefinition) -> None:
        """Register a task definition."""
        if definition.task_type in self._tasks:
            log.warning("Task %r already registered, overwriting", definition.task_type.value)
        steps = {s.id: s for s in self._steps}
        if definition.step_id not in steps:
            raise ValueError(
                f"Task {definition.task_type.value!r} references unknown step {definition.step_id!r}"
            )
        missing = [fid for fid in definition.extraction_fields if fid not in self._fields]
        if missing:
            raise ValueError(
                f"Task {definition.task_type.value!r} extracts unknown fields: {missing}"
            )
        self._tasks[definition.task_type] = definition
        log.debug("Registered task type: %s", definition.task_type.value)

    def get(self, task_type: TaskType | str) -> TaskDefinition:
        """Get a task definition.

        Raises:
            KeyError: If the task type is not registered.
        """
        parsed = TaskType.parse(task_type)
        if parsed is None or parsed not in self._tasks:
            raise KeyError(
                f"Task type {task_type!r} not found. "
                f"Available: {sorted(t.value for t in self._tasks)}"
            )
        return self._tasks[parsed]

    def has(self, task_type: TaskType | str) -> bool:
        parsed = TaskType.parse(task_type)
        return parsed is not None and parsed in self._tasks

    def list_tasks(self) -> list[TaskDefinition]:
        """Return all registered task definitions in declaration order."""
        return list(self._tasks.values())

    # ── Steps and fields ─────────────────────────────────────────────

    @property
    def steps(self) -> tuple[StepDescriptor, ...]:
        """Every step, in declaration order."""
        return self._steps

    def iter_fields(self) -> list[FieldDescriptor]:
        """Every field across every step, in collection order."""
        return list(self._fields.values())

    def get_field(self, field_id: str) -> FieldDescriptor:
        """Look up a field descriptor by id (KeyError if unknown)."""
        return self._fields[field_id]

    def has_field(self, field_id: str) -> bool:
        return field_id in self._fields

    def step_of(self, field_id: str) -> StepDescriptor:
        """The step a field belongs to."""
        return self._field_step[field_id]

    def steps_for(self, task_type: TaskType | str) -> list[StepDescriptor]:
        """Ordered steps visible when *task_type* is the selected task.

        A step gated on some other field than the task type is kept; its
        final visibility is decided by the form state.
        """
        definition = self.get(task_type)
        result: list[StepDescriptor] = []
        for step in self._steps:
            rule = step.show_if
            if rule is not None and rule.depends_on == TASK_TYPE_FIELD:
                if rule.required_value != definition.task_type.value:
                    continue
            result.append(step)
        return result

    def task_specific_fields(self, task_type: TaskType | str) -> tuple[str, ...]:
        """Field ids that only apply to *task_type* (reset on task switch)."""
        definition = self.get(task_type)
        step = next(s for s in self._steps if s.id == definition.step_id)
        return tuple(fd.id for fd in step.fields)

    @property
    def preference_fields(self) -> tuple[str, ...]:
        """Cross-task preference field ids, sent with every task type."""
        return self._preference_fields

    def extraction_schema(self, task_type: TaskType | str) -> ExtractionSchema:
        """Schema an extraction strategy must fill for *task_type*."""
        definition = self.get(task_type)
        return ExtractionSchema(
            task_type=definition.task_type,
            fields=dict(definition.extraction_fields),
        )

    def describe(self) -> dict[str, Any]:
        """JSON-serialisable description of the form for clients."""
        return {
            "steps": [_describe_step(s) for s in self._steps],
            "tasks": [
                {
                    "task_type": d.task_type.value,
                    "display_name": d.display_name,
                    "description": d.description,
                    "task_specific_fields": list(self.task_specific_fields(d.task_type)),
                    "extraction_fields": list(d.extraction_fields),
                }
                for d in self._tasks.values()
            ],
            "preference_fields": list(self._preference_fields),
        }


# ── Module-level singleton ──────────────────────────────────────────

_global_registry: TaskSchemaRegistry | None = None


def get_registry() -> TaskSchemaRegistry:
    """Return the global registry, building it from the catalogue on first call."""
    global _global_registry
    if _global_registry is None:
        from metaprompt.tasks.catalog import FORM_STEPS, PREFERENCE_FIELDS, TASK_DEFINITIONS

        registry = TaskSchemaRegistry(FORM_STEPS, PREFERENCE_FIELDS)
        for definition in TASK_DEFINITIONS:
            registry.register(definition)
        log.info(
            "Loaded %d task type(s): %s",
            len(TASK_DEFINITIONS),
            ", ".join(d.task_type.value for d in TASK_DEFINITIONS),
        )
        _global_registry = registry
    return _global_registry


# ── Internal helpers ────────────────────────────────────────────────


def _describe_rule(step_or_field: StepDescriptor | FieldDescriptor) -> dict[str, str] | None:
    rule = step_or_field.show_if
    if rule is None:
        return None
    return {"field": rule.depends_on, "value": rule.required_value}


def _describe_step(step: StepDescriptor) -> dict[str, Any]:
    fields: list[dict[str, Any]] = []
    for fd in step.fields:
        options: list[Any] = []
        for opt in fd.options:
            if isinstance(opt, str):
                options.append(opt)
            else:
                options.append(
                    {"value": opt.value, "label": opt.label, "description": opt.description}
                )
        fields.append(
            {
                "id": fd.id,
                "label": fd.label,
                "type": fd.kind.value,
                "required": fd.required,
                "default": fd.default,
                "options": options,
                "helper_text": fd.helper_text,
                "show_if": _describe_rule(fd),
            }
        )
    return {
        "id": step.id,
        "title": step.title,
        "fields": fields,
        "show_if": _describe_rule(step),
    }
