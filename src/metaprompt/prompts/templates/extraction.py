"""Prompts for the three auto-fill extraction strategies.

Placeholders: ``{task_label}`` (human task name), ``{field_list}`` (one
``- id: description`` line per schema field), ``{document_text}`` and
``{instruction_text}``.
"""

from __future__ import annotations

# ── Raw prompt data ─────────────────────────────────────────────────

_PROMPT_DATA: dict[str, str] = {
    "EXTRACTION_SYSTEM_PROMPT": """You fill in a structured form from user material.
Return one JSON object containing every requested field as a string.
When a field cannot be determined, return an empty string for it; never \
omit a field and never return null.
Write field values in the language of the source material.""",
    "DOCUMENT_ONLY_PROMPT": """Task type: {task_label}

Extract the following fields from the documents below. Use only facts stated \
in the documents; do not invent details.

Fields:
{field_list}

Documents:
{document_text}""",
    "COMBINED_PROMPT": """Task type: {task_label}

The user's instruction states the primary intent. The documents supply \
factual detail. When they conflict, keep the goal stated in the instruction \
and use the documents only to fill factual blanks.

Fields:
{field_list}

Instruction:
{instruction_text}

Documents:
{document_text}""",
    "IDEA_EXPANSION_PROMPT": """Task type: {task_label}

The user gave a short idea. Expand it into a complete, plausible \
specification: infer reasonable values for every field from the idea \
rather than copying it literally.

Fields:
{field_list}

Idea:
{instruction_text}""",
}

# ── PEP 562 module __getattr__ ──────────────────────────────────────

_PROMPT_NAMES = frozenset(_PROMPT_DATA.keys())


def __getattr__(name: str) -> str:
    if name in _PROMPT_NAMES:
        from metaprompt.prompts.registry import get_prompt

        return get_prompt("extraction", name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return list(_PROMPT_NAMES) + ["_PROMPT_DATA"]
