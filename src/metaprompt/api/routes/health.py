"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe, always 200 while the process is up."""
    return {"status": "ok"}


@router.get("/ready")
async def ready(req: Request) -> dict[str, str]:
    """Readiness probe: the form session has been built."""
    if getattr(req.app.state, "session", None) is None:
        raise HTTPException(status_code=503, detail="Form session not initialised")
    return {"status": "ready"}
