"""Task schema registry: task types, form steps and extraction schemas."""

from __future__ import annotations

from metaprompt.tasks.fields import (
    TASK_TYPE_FIELD,
    ChoiceOption,
    FieldDescriptor,
    FieldKind,
    StepDescriptor,
    TaskType,
    VisibilityRule,
)
from metaprompt.tasks.registry import (
    ExtractionSchema,
    TaskDefinition,
    TaskSchemaRegistry,
    get_registry,
)

__all__ = [
    "TASK_TYPE_FIELD",
    "ChoiceOption",
    "ExtractionSchema",
    "FieldDescriptor",
    "FieldKind",
    "StepDescriptor",
    "TaskDefinition",
    "TaskSchemaRegistry",
    "TaskType",
    "VisibilityRule",
    "get_registry",
]
