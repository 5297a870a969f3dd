"""LiteLLM-backed structured generation client.

The client is an explicitly constructed object that owns its credential;
nothing is read from or written to process-wide provider state.
"""

from __future__ import annotations

import logging
from typing import Any

from metaprompt.core.config import LLMConfig
from metaprompt.inference.protocols import (
    FINISH_MAX_TOKENS,
    FINISH_SAFETY,
    FINISH_STOP,
    GenerationRequest,
    GenerationResult,
)

log = logging.getLogger(__name__)

# LiteLLM's OpenAI-style finish reasons → provider-neutral stop reasons
_FINISH_REASON_MAP = {
    "stop": FINISH_STOP,
    "length": FINISH_MAX_TOKENS,
    "content_filter": FINISH_SAFETY,
}


class LiteLLMGenerationClient:
    """Structured generation via ``litellm.acompletion()`` with a JSON-schema response format."""

    def __init__(self, config: LLMConfig) -> None:
        self._model = config.model
        self._api_key = config.api_key
        self._temperature = config.temperature
        self._timeout = config.timeout
        self._max_output_tokens = config.max_output_tokens

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Single generation call. Transport errors propagate unchanged."""
        from litellm import acompletion

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": request.system_instruction},
                {"role": "user", "content": request.user_payload},
            ],
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": request.schema_name,
                    "schema": request.output_schema,
                    "strict": True,
                },
            },
            "temperature": (
                request.temperature if request.temperature is not None else self._temperature
            ),
            "timeout": self._timeout,
        }
        if self._api_key:
            kwargs["api_key"] = self._api_key
        if self._max_output_tokens:
            kwargs["max_tokens"] = self._max_output_tokens

        log.debug("Generation call: model=%s schema=%s", self._model, request.schema_name)
        response = await acompletion(**kwargs)

        choice = response.choices[0] if response.choices else None
        text = (choice.message.content or "") if choice is not None else ""
        reason = _normalise_finish_reason(choice.finish_reason if choice is not None else None)

        usage: dict[str, int] = {}
        if hasattr(response, "usage") and response.usage:
            usage = {
                "prompt_tokens": getattr(response.usage, "prompt_tokens", 0),
                "completion_tokens": getattr(response.usage, "completion_tokens", 0),
                "total_tokens": getattr(response.usage, "total_tokens", 0),
            }

        return GenerationResult(
            text=text,
            finish_reason=reason,
            blocked_categories=_blocked_categories(response) if not text.strip() else [],
            usage=usage,
        )


def _normalise_finish_reason(reason: str | None) -> str:
    if not reason:
        return ""
    return _FINISH_REASON_MAP.get(reason.lower(), reason.upper())


def _blocked_categories(response: Any) -> list[str]:
    """Blocked safety categories reported by the provider, if any.

    Gemini surfaces per-candidate safety ratings through LiteLLM's hidden
    params as a list (or list of lists) of ``{"category", "blocked"}`` dicts.
    """
    hidden = getattr(response, "_hidden_params", None)
    if not isinstance(hidden, dict):
        return []
    ratings = hidden.get("vertex_ai_safety_results") or []

    flat: list[Any] = []
    for item in ratings:
        if isinstance(item, list):
            flat.extend(item)
        else:
            flat.append(item)

    categories: list[str] = []
    for rating in flat:
        if isinstance(rating, dict) and rating.get("blocked") and rating.get("category"):
            categories.append(str(rating["category"]))
    return categories
