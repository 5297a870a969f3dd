"""Tests for the closed per-kind field behaviour."""

from __future__ import annotations

import pytest

from metaprompt.tasks.fields import (
    FieldDescriptor,
    FieldKind,
    TaskType,
    VisibilityRule,
    default_value,
    has_valid_shape,
    is_blank,
)


def _field(kind: FieldKind, default: str | bool | None = None) -> FieldDescriptor:
    return FieldDescriptor(id="f", label="F", kind=kind, default=default)


class TestDefaultValue:
    def test_checkbox_defaults_to_empty_list(self) -> None:
        assert default_value(_field(FieldKind.CHECKBOX)) == []

    def test_checkbox_default_is_a_fresh_list(self) -> None:
        fd = _field(FieldKind.CHECKBOX)
        assert default_value(fd) is not default_value(fd)

    def test_toggle_defaults_to_false(self) -> None:
        assert default_value(_field(FieldKind.TOGGLE)) is False
        assert default_value(_field(FieldKind.TOGGLE, True)) is True

    @pytest.mark.parametrize(
        "kind",
        [FieldKind.TEXT, FieldKind.TEXTAREA, FieldKind.SELECT, FieldKind.RADIO, FieldKind.BUTTONS],
    )
    def test_text_like_kinds(self, kind: FieldKind) -> None:
        assert default_value(_field(kind)) == ""
        assert default_value(_field(kind, "sedang")) == "sedang"


class TestShapeAndBlank:
    def test_shapes(self) -> None:
        assert has_valid_shape(_field(FieldKind.CHECKBOX), ["a", "b"])
        assert not has_valid_shape(_field(FieldKind.CHECKBOX), "a")
        assert not has_valid_shape(_field(FieldKind.CHECKBOX), [1])
        assert has_valid_shape(_field(FieldKind.TOGGLE), False)
        assert not has_valid_shape(_field(FieldKind.TOGGLE), "false")
        assert has_valid_shape(_field(FieldKind.TEXT), "x")
        assert not has_valid_shape(_field(FieldKind.SELECT), True)

    def test_blank(self) -> None:
        assert is_blank(_field(FieldKind.TEXT), "   ")
        assert not is_blank(_field(FieldKind.TEXT), "x")
        assert is_blank(_field(FieldKind.CHECKBOX), [])
        assert not is_blank(_field(FieldKind.TOGGLE), False)
        assert is_blank(_field(FieldKind.TEXT), None)


class TestVisibilityRule:
    def test_bool_matches_lowercase_string(self) -> None:
        rule = VisibilityRule("need_citations", "true")
        assert rule.matches(True)
        assert not rule.matches(False)

    def test_list_membership(self) -> None:
        rule = VisibilityRule("tools_available", "rag")
        assert rule.matches(["web_search", "rag"])
        assert not rule.matches([])

    def test_string_equality(self) -> None:
        rule = VisibilityRule("task_type", "agent")
        assert rule.matches("agent")
        assert not rule.matches("document")
        assert not rule.matches(None)


class TestTaskTypeParse:
    def test_parse(self) -> None:
        assert TaskType.parse("Agent ") is TaskType.AGENT
        assert TaskType.parse(TaskType.DOCUMENT) is TaskType.DOCUMENT
        assert TaskType.parse("") is None
        assert TaskType.parse("podcast") is None
        assert TaskType.parse(None) is None
