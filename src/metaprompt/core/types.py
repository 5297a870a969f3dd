"""Shared type aliases for the framework layer."""

from __future__ import annotations

from typing import Any, Union

# A single form value: free text / choice, toggle, or multi-choice selection
FieldValue = Union[str, bool, list[str]]

# Field id → value, as held by FormState and sent over the wire
FormValues = dict[str, FieldValue]

# Field id → extracted text, as returned by an extraction strategy
ExtractedFields = dict[str, str]

# JSON-like dict returned by LLM parsing
JsonDict = dict[str, Any]
