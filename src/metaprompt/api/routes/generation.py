"""Auto-fill and generation endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from metaprompt.api.routes.form import FormSnapshot, get_session, snapshot_session
from metaprompt.models import PartialFilesFailed
from metaprompt.services.form_session import FormSession

router = APIRouter(tags=["generation"])


class AnalyzeResponse(BaseModel):
    """Auto-fill outcome plus the form after the merge."""

    strategy: str
    fields: dict[str, str] = Field(default_factory=dict)
    converted_files: list[str] = Field(default_factory=list)
    warning: Optional[PartialFilesFailed] = None
    applied: bool = True
    form: FormSnapshot


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(session: FormSession = Depends(get_session)) -> AnalyzeResponse:
    """Fill task fields from the pending files and/or instruction."""
    result = await session.analyze()
    return AnalyzeResponse(
        strategy=result.strategy.value,
        fields=result.fields,
        converted_files=result.converted_files,
        warning=result.warning,
        applied=result.applied,
        form=snapshot_session(session),
    )


@router.post("/generate")
async def generate(session: FormSession = Depends(get_session)) -> dict[str, str]:
    """Generate the meta-prompt artifact (camelCase keys)."""
    artifact = await session.generate()
    return artifact.model_dump(by_alias=True)
