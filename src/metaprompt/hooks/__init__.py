"""Observability hooks: structured logging and per-run tracking."""

from __future__ import annotations

from metaprompt.hooks.logging_config import setup_logging
from metaprompt.hooks.run_tracker import end_run, get_current_run, start_run, track_stage

__all__ = [
    "end_run",
    "get_current_run",
    "setup_logging",
    "start_run",
    "track_stage",
]
