"""Form endpoints: schema, current state, field edits, pending inputs, reset."""

from __future__ import annotations

from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from pydantic import BaseModel, Field

from metaprompt.models import PartialFilesFailed, UploadedFile
from metaprompt.services.form_session import FormSession

router = APIRouter(tags=["form"])


def get_session(req: Request) -> FormSession:
    """The process-wide form session built in the app lifespan."""
    return req.app.state.session


class FieldUpdate(BaseModel):
    """New value for one form field."""

    value: Union[bool, list[str], str]


class InstructionUpdate(BaseModel):
    """Free-text idea used by auto-fill."""

    text: str = ""


class PendingFile(BaseModel):
    filename: str
    size: int


class FormSnapshot(BaseModel):
    """Everything a client needs to render the form."""

    task_type: Optional[str] = None
    values: dict[str, Any] = Field(default_factory=dict)
    visible_steps: list[str] = Field(default_factory=list)
    visible_fields: list[str] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)
    pending_files: list[PendingFile] = Field(default_factory=list)
    instruction: str = ""
    can_analyze: bool = False
    is_analyzing: bool = False
    is_generating: bool = False
    artifact: Optional[dict[str, str]] = None
    warning: Optional[PartialFilesFailed] = None
    last_error: Optional[dict[str, str]] = None


def snapshot_session(session: FormSession) -> FormSnapshot:
    state = session.state
    last_error = session.last_error
    return FormSnapshot(
        task_type=state.task_type.value if state.task_type else None,
        values=state.snapshot(),
        visible_steps=[s.id for s in session.registry.steps if state.visible(s)],
        visible_fields=[f.id for f in state.visible_fields()],
        missing_required=state.missing_required(),
        pending_files=[
            PendingFile(filename=f.filename, size=len(f.content)) for f in session.pending_files
        ],
        instruction=session.instruction,
        can_analyze=session.can_analyze,
        is_analyzing=session.is_analyzing,
        is_generating=session.is_generating,
        artifact=session.artifact.model_dump(by_alias=True) if session.artifact else None,
        warning=session.warning,
        last_error=(
            {"error": last_error.message, "type": last_error.error_code} if last_error else None
        ),
    )


@router.get("/schema")
async def schema(session: FormSession = Depends(get_session)) -> dict[str, Any]:
    """Steps, fields and task definitions."""
    return session.registry.describe()


@router.get("/form", response_model=FormSnapshot)
async def get_form(session: FormSession = Depends(get_session)) -> FormSnapshot:
    return snapshot_session(session)


@router.put("/form/fields/{field_id}", response_model=FormSnapshot)
async def set_field(
    field_id: str,
    update: FieldUpdate,
    session: FormSession = Depends(get_session),
) -> FormSnapshot:
    """Write one field. Changing ``task_type`` resets the old task's fields."""
    session.set_field(field_id, update.value)
    return snapshot_session(session)


@router.post("/files", response_model=FormSnapshot)
async def upload_files(
    req: Request,
    files: list[UploadFile] = File(...),
    session: FormSession = Depends(get_session),
) -> FormSnapshot:
    """Queue documents for the next auto-fill."""
    max_bytes = req.app.state.settings.api.max_upload_bytes
    uploads: list[UploadedFile] = []
    for upload in files:
        # one byte past the limit is enough to reject
        content = await upload.read(max_bytes + 1)
        if len(content) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"{upload.filename} exceeds the {max_bytes}-byte upload limit",
            )
        uploads.append(UploadedFile(filename=upload.filename or "upload", content=content))
    session.add_files(uploads)
    return snapshot_session(session)


@router.delete("/files/{filename}", response_model=FormSnapshot)
async def remove_file(filename: str, session: FormSession = Depends(get_session)) -> FormSnapshot:
    if not session.remove_file(filename):
        raise HTTPException(status_code=404, detail=f"No pending file named {filename!r}")
    return snapshot_session(session)


@router.put("/instruction", response_model=FormSnapshot)
async def set_instruction(
    update: InstructionUpdate,
    session: FormSession = Depends(get_session),
) -> FormSnapshot:
    session.set_instruction(update.text)
    return snapshot_session(session)


@router.post("/reset", response_model=FormSnapshot)
async def reset(session: FormSession = Depends(get_session)) -> FormSnapshot:
    """Fresh form, no pending inputs, no artifact."""
    session.reset()
    return snapshot_session(session)
