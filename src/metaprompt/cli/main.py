"""CLI for metaprompt: schema / generate / serve commands."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from metaprompt.core.config import AppSettings
from metaprompt.core.types import FieldValue
from metaprompt.exceptions import MetaPromptError
from metaprompt.hooks import setup_logging
from metaprompt.inference.client import LiteLLMGenerationClient
from metaprompt.ingestion.document_text import DefaultDocumentTextExtractor
from metaprompt.models import GeneratedArtifact, UploadedFile
from metaprompt.services.form_session import FormSession
from metaprompt.tasks.fields import TASK_TYPE_FIELD, FieldDescriptor, FieldKind
from metaprompt.tasks.registry import TaskSchemaRegistry, get_registry

app = typer.Typer(name="metaprompt", help="Task-adaptive meta-prompt generator")
console = Console()

_TRUE = {"1", "true", "yes", "y", "on", "ya"}
_FALSE = {"0", "false", "no", "n", "off", "tidak", ""}

_ARTIFACT_SECTIONS = (
    ("summary", "Ringkasan"),
    ("techniques", "Teknik"),
    ("main_prompt", "Prompt Utama"),
    ("variant_a", "Varian A (konservatif)"),
    ("variant_b", "Varian B (kreatif)"),
    ("ui_spec", "Spesifikasi UI"),
    ("checklist", "Checklist"),
    ("example", "Contoh"),
)


def _build_settings(api_key: Optional[str], model: Optional[str]) -> AppSettings:
    """Build settings, overriding env defaults with CLI flags."""
    settings = AppSettings()
    overrides: dict = {}
    if api_key:
        overrides["api_key"] = api_key
    if model:
        overrides["model"] = model
    if overrides:
        settings.llm = settings.llm.model_copy(update=overrides)
    return settings


def coerce_value(descriptor: FieldDescriptor, raw: str) -> FieldValue:
    """Turn a command-line string into a value of the field's shape."""
    kind = descriptor.kind
    if kind is FieldKind.CHECKBOX:
        return [item.strip() for item in raw.split(",") if item.strip()]
    if kind is FieldKind.TOGGLE:
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise typer.BadParameter(f"{descriptor.id} expects true/false, got {raw!r}")
    if kind in (FieldKind.TEXT, FieldKind.TEXTAREA, FieldKind.SELECT, FieldKind.RADIO, FieldKind.BUTTONS):
        return raw
    raise AssertionError(f"Unhandled field kind: {kind!r}")


def parse_assignments(assignments: list[str], registry: TaskSchemaRegistry) -> list[tuple[str, FieldValue]]:
    """``["goal=Tulis SOP", "need_citations=true"]`` → typed ``(id, value)`` pairs."""
    parsed: list[tuple[str, FieldValue]] = []
    for item in assignments:
        field_id, sep, raw = item.partition("=")
        field_id = field_id.strip()
        if not sep or not field_id:
            raise typer.BadParameter(f"Expected id=value, got {item!r}")
        if not registry.has_field(field_id):
            raise typer.BadParameter(f"Unknown field {field_id!r}")
        parsed.append((field_id, coerce_value(registry.get_field(field_id), raw)))
    return parsed


def _load_files(paths: list[Path]) -> list[UploadedFile]:
    uploads = []
    for path in paths:
        if not path.is_file():
            raise typer.BadParameter(f"File not found: {path}")
        uploads.append(UploadedFile(filename=path.name, content=path.read_bytes()))
    return uploads


def _print_artifact(artifact: GeneratedArtifact) -> None:
    for attr, title in _ARTIFACT_SECTIONS:
        console.print(Panel(getattr(artifact, attr) or "-", title=title, title_align="left"))


@app.command()
def schema(
    task_type: Optional[str] = typer.Option(None, "--task-type", help="Only steps visible for this task type"),
) -> None:
    """Show the form steps and fields."""
    registry = get_registry()
    if task_type and not registry.has(task_type):
        raise typer.BadParameter(f"Unknown task type {task_type!r}")
    steps = registry.steps_for(task_type) if task_type else list(registry.steps)

    table = Table(title="Form Fields")
    table.add_column("Step", style="cyan")
    table.add_column("Field", style="green")
    table.add_column("Kind")
    table.add_column("Required")
    table.add_column("Default")
    table.add_column("Shown when")

    for step in steps:
        for fd in step.fields:
            rule = fd.show_if or step.show_if
            table.add_row(
                step.id,
                fd.id,
                fd.kind.value,
                "yes" if fd.required else "",
                "" if fd.default is None else str(fd.default),
                f"{rule.depends_on}={rule.required_value}" if rule else "",
            )

    console.print(table)


@app.command()
def generate(
    task_type: str = typer.Option(..., "--task-type", help="document, agent or application"),
    assignments: Optional[list[str]] = typer.Option(None, "--set", help="Field value as id=value (repeatable)"),
    files: Optional[list[Path]] = typer.Option(None, "--file", help="Document to auto-fill from (repeatable)"),
    instruction: str = typer.Option("", "--instruction", help="Short idea to auto-fill from"),
    as_json: bool = typer.Option(False, "--json", help="Print the artifact as JSON"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="LLM API key"),
    model: Optional[str] = typer.Option(None, "--model", help="LiteLLM model name"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Fill the form, optionally auto-fill from files/idea, then generate."""
    assignments = assignments or []
    files = files or []

    settings = _build_settings(api_key, model)
    settings.observability = settings.observability.model_copy(
        update={"log_level": "DEBUG" if verbose else "WARNING"}
    )
    setup_logging(settings.observability)
    registry = get_registry()
    session = FormSession(
        LiteLLMGenerationClient(settings.llm),
        DefaultDocumentTextExtractor(),
        settings,
        registry,
    )

    try:
        overrides = parse_assignments(assignments, registry)
        session.set_field(TASK_TYPE_FIELD, task_type)

        if files or instruction.strip():
            session.add_files(_load_files(files))
            session.set_instruction(instruction)
            result = asyncio.run(session.analyze())
            console.print(f"[bold]Auto-fill ({result.strategy.value}):[/bold]")
            for field_id, value in result.fields.items():
                console.print(f"  {field_id}: {value or '[dim]-[/dim]'}")
            if result.warning is not None:
                console.print(f"[yellow]{result.warning.message}[/yellow]")

        # Explicit --set values win over auto-filled ones
        for field_id, value in overrides:
            session.set_field(field_id, value)

        with console.status("Generating meta-prompt..."):
            artifact = asyncio.run(session.generate())
    except MetaPromptError as exc:
        console.print(f"[red]{exc.error_code}:[/red] {exc.message}")
        raise typer.Exit(code=1) from exc

    if as_json:
        console.print_json(json.dumps(artifact.model_dump(by_alias=True)))
    else:
        _print_artifact(artifact)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8080, help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("metaprompt.api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
