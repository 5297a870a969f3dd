"""Form state: current field values plus the task-switch reset rule."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Union

from metaprompt.core.types import FieldValue, FormValues
from metaprompt.exceptions import FieldShapeError
from metaprompt.tasks.fields import (
    TASK_TYPE_FIELD,
    FieldDescriptor,
    StepDescriptor,
    TaskType,
    default_value,
    has_valid_shape,
    is_blank,
)
from metaprompt.tasks.registry import TaskSchemaRegistry, get_registry

log = logging.getLogger(__name__)


class FormState:
    """Mapping of field id → value for one session.

    Every field in the registry always holds a value of the right shape for
    its kind.  Values are only cleared by the task-type reset rule or by
    replacing the whole instance with ``FormState.initialize()``.
    """

    def __init__(self, values: FormValues, registry: TaskSchemaRegistry | None = None) -> None:
        self._registry = registry or get_registry()
        self._values: FormValues = values

    @classmethod
    def initialize(cls, registry: TaskSchemaRegistry | None = None) -> FormState:
        """Fresh state with every field at its declared default."""
        reg = registry or get_registry()
        return cls({fd.id: default_value(fd) for fd in reg.iter_fields()}, reg)

    # ── Reads ────────────────────────────────────────────────────────

    @property
    def registry(self) -> TaskSchemaRegistry:
        return self._registry

    @property
    def task_type(self) -> TaskType | None:
        """The selected task type, or ``None`` before one is chosen."""
        return TaskType.parse(self._values.get(TASK_TYPE_FIELD))

    def get(self, field_id: str) -> FieldValue:
        if field_id not in self._values:
            raise KeyError(f"Unknown field {field_id!r}")
        return copy.copy(self._values[field_id])

    def snapshot(self) -> FormValues:
        """Deep copy of all values, safe to hand to another component."""
        return copy.deepcopy(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormState):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"FormState(task_type={self._values.get(TASK_TYPE_FIELD)!r}, fields={len(self._values)})"

    # ── Writes ───────────────────────────────────────────────────────

    def set_field(self, field_id: str, value: FieldValue) -> None:
        """Replace the value at *field_id*.

        Only the shape is checked here; required fields are checked at
        submission.  Writing the task type field triggers
        :meth:`on_task_type_change`.

        Raises:
            FieldShapeError: Unknown field, wrong value shape, or an unknown task type.
        """
        descriptor = self._descriptor(field_id)
        if not has_valid_shape(descriptor, value):
            raise FieldShapeError(
                f"Field {field_id!r} ({descriptor.kind.value}) cannot hold {type(value).__name__}"
            )

        if field_id == TASK_TYPE_FIELD:
            if value and TaskType.parse(value) is None:
                raise FieldShapeError(
                    f"Unknown task type {value!r}; expected one of "
                    f"{[t.value for t in TaskType]}"
                )
            previous = self.task_type
            self._values[field_id] = value
            self.on_task_type_change(previous, self.task_type)
            return

        self._values[field_id] = list(value) if isinstance(value, list) else value

    def on_task_type_change(self, old: TaskType | None, new: TaskType | None) -> list[str]:
        """Reset fields specific to *old* when the task type really changed.

        No-op when there was no previous type or the type is unchanged.
        Returns the ids that were reset.
        """
        if old is None or old == new:
            return []
        reset_ids = list(self._registry.task_specific_fields(old))
        for fid in reset_ids:
            self._values[fid] = default_value(self._registry.get_field(fid))
        log.debug(
            "Task type changed %s -> %s; reset %d field(s)",
            old.value,
            new.value if new else None,
            len(reset_ids),
        )
        return reset_ids

    def merge(self, partial: Mapping[str, str]) -> list[str]:
        """Overwrite fields with *partial* (last write wins, no combining).

        Keys that are not form fields are skipped.  Returns the ids written.
        """
        written: list[str] = []
        for fid, value in partial.items():
            if not self._registry.has_field(fid):
                log.warning("Ignoring extracted value for unknown field %r", fid)
                continue
            self.set_field(fid, value)
            written.append(fid)
        return written

    # ── Visibility / validation ──────────────────────────────────────

    def visible(self, target: Union[StepDescriptor, FieldDescriptor, str]) -> bool:
        """Whether a step or field is currently shown.

        A field is visible when its step is visible and its own predicate, if
        any, holds.  A string is looked up as a field id.
        """
        if isinstance(target, str):
            target = self._descriptor(target)
        if isinstance(target, FieldDescriptor):
            if not self._rule_holds(self._registry.step_of(target.id)):
                return False
        return self._rule_holds(target)

    def visible_fields(self) -> list[FieldDescriptor]:
        return [fd for fd in self._registry.iter_fields() if self.visible(fd)]

    def missing_required(self) -> list[str]:
        """Ids of visible required fields that are still blank."""
        return [
            fd.id
            for fd in self.visible_fields()
            if fd.required and is_blank(fd, self._values.get(fd.id))
        ]

    # ── Internal helpers ────────────────────────────────────────────

    def _descriptor(self, field_id: str) -> FieldDescriptor:
        if not self._registry.has_field(field_id):
            raise FieldShapeError(f"Unknown field {field_id!r}")
        return self._registry.get_field(field_id)

    def _rule_holds(self, target: Union[StepDescriptor, FieldDescriptor]) -> bool:
        rule = target.show_if
        if rule is None:
            return True
        return rule.matches(self._values.get(rule.depends_on))
