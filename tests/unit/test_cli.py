"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest
import typer
from typer.testing import CliRunner

from metaprompt.cli import main as cli_main
from metaprompt.tasks.registry import TaskSchemaRegistry
from tests.fakes.fake_generation import FakeGenerationClient, artifact_payload, json_result

runner = CliRunner()

# Keep rich tables from wrapping field ids
_WIDE = {"COLUMNS": "200"}


@pytest.fixture
def fake_llm(monkeypatch: pytest.MonkeyPatch) -> FakeGenerationClient:
    fake = FakeGenerationClient()
    monkeypatch.setattr(cli_main, "LiteLLMGenerationClient", lambda config: fake)
    return fake


class TestCoerceValue:
    def test_checkbox_splits_on_commas(self, registry: TaskSchemaRegistry) -> None:
        fd = registry.get_field("tools_available")
        assert cli_main.coerce_value(fd, "rag, web_search,") == ["rag", "web_search"]

    @pytest.mark.parametrize(("raw", "expected"), [("true", True), ("Ya", True), ("no", False), ("", False)])
    def test_toggle(self, registry: TaskSchemaRegistry, raw: str, expected: bool) -> None:
        assert cli_main.coerce_value(registry.get_field("need_citations"), raw) is expected

    def test_toggle_rejects_garbage(self, registry: TaskSchemaRegistry) -> None:
        with pytest.raises(typer.BadParameter):
            cli_main.coerce_value(registry.get_field("need_citations"), "maybe")

    def test_text_passthrough(self, registry: TaskSchemaRegistry) -> None:
        assert cli_main.coerce_value(registry.get_field("goal"), "a=b") == "a=b"


class TestParseAssignments:
    def test_splits_on_first_equals(self, registry: TaskSchemaRegistry) -> None:
        parsed = cli_main.parse_assignments(["goal=x=y", "need_citations=true"], registry)
        assert parsed == [("goal", "x=y"), ("need_citations", True)]

    def test_unknown_field(self, registry: TaskSchemaRegistry) -> None:
        with pytest.raises(typer.BadParameter):
            cli_main.parse_assignments(["nope=1"], registry)

    def test_missing_equals(self, registry: TaskSchemaRegistry) -> None:
        with pytest.raises(typer.BadParameter):
            cli_main.parse_assignments(["goal"], registry)


class TestSchemaCommand:
    def test_lists_all_fields(self) -> None:
        result = runner.invoke(cli_main.app, ["schema"], env=_WIDE)
        assert result.exit_code == 0
        assert "tools_available" in result.output
        assert "agent_goal" in result.output

    def test_filtered_by_task_type(self) -> None:
        result = runner.invoke(cli_main.app, ["schema", "--task-type", "document"], env=_WIDE)
        assert result.exit_code == 0
        assert "goal" in result.output
        assert "agent_goal" not in result.output

    def test_unknown_task_type(self) -> None:
        result = runner.invoke(cli_main.app, ["schema", "--task-type", "podcast"])
        assert result.exit_code != 0


class TestGenerateCommand:
    def test_json_output(self, fake_llm: FakeGenerationClient) -> None:
        result = runner.invoke(
            cli_main.app,
            ["generate", "--task-type", "document", "--set", "goal=Tulis SOP", "--json"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == artifact_payload()
        assert "* **goal**: Tulis SOP" in fake_llm.requests[0].user_payload

    def test_incomplete_form_exits_nonzero(self, fake_llm: FakeGenerationClient) -> None:
        result = runner.invoke(cli_main.app, ["generate", "--task-type", "document"])
        assert result.exit_code == 1
        assert "form_incomplete" in result.output
        assert fake_llm.call_count == 0

    def test_instruction_auto_fill_then_overrides(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = FakeGenerationClient(
            [
                json_result({"goal": "dari ide", "audience": "HR"}),
                json_result(artifact_payload()),
            ]
        )
        monkeypatch.setattr(cli_main, "LiteLLMGenerationClient", lambda config: fake)

        result = runner.invoke(
            cli_main.app,
            [
                "generate",
                "--task-type",
                "document",
                "--instruction",
                "SOP onboarding",
                "--set",
                "audience=Manajer",
                "--json",
            ],
        )
        assert result.exit_code == 0, result.output
        assert fake.call_count == 2
        payload = fake.requests[1].user_payload
        assert "* **goal**: dari ide" in payload
        assert "* **audience**: Manajer" in payload

    @pytest.mark.parametrize(("flags", "level"), [([], "WARNING"), (["-v"], "DEBUG")])
    def test_configures_structured_logging(
        self, fake_llm: FakeGenerationClient, monkeypatch: pytest.MonkeyPatch, flags: list[str], level: str
    ) -> None:
        configured = []
        monkeypatch.setattr(cli_main, "setup_logging", configured.append)
        result = runner.invoke(
            cli_main.app,
            ["generate", "--task-type", "document", "--set", "goal=Tulis SOP", "--json", *flags],
        )
        assert result.exit_code == 0, result.output
        assert [c.log_level for c in configured] == [level]

    def test_missing_file(self, fake_llm: FakeGenerationClient, tmp_path) -> None:
        result = runner.invoke(
            cli_main.app,
            ["generate", "--task-type", "document", "--file", str(tmp_path / "absent.txt")],
        )
        assert result.exit_code != 0
        assert fake_llm.call_count == 0
