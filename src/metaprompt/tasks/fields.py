"""Static form descriptors: task types, field kinds, fields and steps.

``FieldKind`` is a closed set.  Everything that behaves differently per kind
(default value, shape check, blank check) is written as one explicit branch
per member in this module, so adding a kind means touching every branch here
and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from metaprompt.core.types import FieldValue

# Id of the field whose value selects the active task type
TASK_TYPE_FIELD = "task_type"


class TaskType(str, Enum):
    """Top-level classification of the artifact the user wants."""

    DOCUMENT = "document"
    AGENT = "agent"
    APPLICATION = "application"

    @classmethod
    def parse(cls, value: object) -> TaskType | None:
        """Return the member for *value*, or ``None`` for blank/unknown input."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class FieldKind(str, Enum):
    """Display kind of a form field."""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    TOGGLE = "toggle"
    RADIO = "radio"
    CHECKBOX = "checkbox"  # multi-choice set
    BUTTONS = "buttons"  # single choice rendered as a button group


@dataclass(frozen=True)
class ChoiceOption:
    """A described option, used by button-group fields."""

    value: str
    label: str
    description: str = ""


@dataclass(frozen=True)
class VisibilityRule:
    """Show a step or field only when another field holds ``required_value``."""

    depends_on: str
    required_value: str

    def matches(self, current: FieldValue | None) -> bool:
        if isinstance(current, bool):
            return str(current).lower() == self.required_value.lower()
        if isinstance(current, list):
            return self.required_value in current
        return current == self.required_value


@dataclass(frozen=True)
class FieldDescriptor:
    """Immutable definition of one form field."""

    id: str
    label: str
    kind: FieldKind
    required: bool = False
    default: Union[str, bool, None] = None
    options: tuple[Union[str, ChoiceOption], ...] = ()
    helper_text: str = ""
    show_if: VisibilityRule | None = None

    @property
    def option_values(self) -> tuple[str, ...]:
        return tuple(o.value if isinstance(o, ChoiceOption) else o for o in self.options)


@dataclass(frozen=True)
class StepDescriptor:
    """An ordered group of fields under a title."""

    id: str
    title: str
    fields: tuple[FieldDescriptor, ...] = field(default_factory=tuple)
    show_if: VisibilityRule | None = None


# ── Per-kind behaviour ───────────────────────────────────────────────


def default_value(descriptor: FieldDescriptor) -> FieldValue:
    """Initial value for a field, as produced by ``FormState.initialize``."""
    kind = descriptor.kind
    if kind is FieldKind.CHECKBOX:
        return []
    if kind is FieldKind.TOGGLE:
        return bool(descriptor.default) if descriptor.default is not None else False
    if kind in (FieldKind.TEXT, FieldKind.TEXTAREA, FieldKind.SELECT, FieldKind.RADIO, FieldKind.BUTTONS):
        return descriptor.default if isinstance(descriptor.default, str) else ""
    raise AssertionError(f"Unhandled field kind: {kind!r}")


def has_valid_shape(descriptor: FieldDescriptor, value: object) -> bool:
    """Whether *value* is storable in a field of this kind."""
    kind = descriptor.kind
    if kind is FieldKind.CHECKBOX:
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    if kind is FieldKind.TOGGLE:
        return isinstance(value, bool)
    if kind in (FieldKind.TEXT, FieldKind.TEXTAREA, FieldKind.SELECT, FieldKind.RADIO, FieldKind.BUTTONS):
        return isinstance(value, str)
    raise AssertionError(f"Unhandled field kind: {kind!r}")


def is_blank(descriptor: FieldDescriptor, value: FieldValue | None) -> bool:
    """Whether a required field should be reported as missing."""
    kind = descriptor.kind
    if value is None:
        return True
    if kind is FieldKind.CHECKBOX:
        return len(value) == 0  # type: ignore[arg-type]
    if kind is FieldKind.TOGGLE:
        # A toggle always carries an answer
        return False
    if kind in (FieldKind.TEXT, FieldKind.TEXTAREA, FieldKind.SELECT, FieldKind.RADIO, FieldKind.BUTTONS):
        return not str(value).strip()
    raise AssertionError(f"Unhandled field kind: {kind!r}")
