"""Prompt templates and lookup."""

from __future__ import annotations

from metaprompt.prompts.registry import get_prompt

__all__ = ["get_prompt"]
