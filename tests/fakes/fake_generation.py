"""Fake structured generation client for testing: no LLM calls.

Usage::

    client = FakeGenerationClient(responses=[
        GenerationResult(text='{"goal": "SOP"}', finish_reason="STOP"),
        RuntimeError("429 resource exhausted"),
    ])
    result = await client.generate(request)
    assert client.requests[0].user_payload  # inspect what was sent
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Union

from metaprompt.inference.protocols import GenerationRequest, GenerationResult

Response = Union[GenerationResult, BaseException]


def json_result(data: dict[str, Any], finish_reason: str = "STOP") -> GenerationResult:
    """A successful result whose text is *data* as JSON."""
    return GenerationResult(text=json.dumps(data), finish_reason=finish_reason)


def artifact_payload(**overrides: str) -> dict[str, str]:
    """A valid eight-field artifact (camelCase keys)."""
    data = {
        "summary": "Ringkasan kebutuhan",
        "techniques": "CoT-SAFE, Validation",
        "mainPrompt": "Peran: Anda adalah penulis SOP.",
        "variantA": "Versi konservatif",
        "variantB": "Versi kreatif",
        "uiSpec": '{"fields": []}',
        "checklist": "- akurat\n- aman",
        "example": "Contoh pengisian",
    }
    data.update(overrides)
    return data


class FakeGenerationClient:
    """Canned-response generation client.

    Each ``generate()`` call consumes the next response; an exception in the
    list is raised instead of returned.  When exhausted, ``default`` is used.
    If ``gate`` is set, calls wait on it before answering so tests can
    observe in-flight state.
    """

    def __init__(
        self,
        responses: list[Response] | None = None,
        *,
        default: Response | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self._responses = list(responses or [])
        self._default = default if default is not None else json_result(artifact_payload())
        self.gate = gate
        self.requests: list[GenerationRequest] = []

    def queue(self, *responses: Response) -> None:
        """Append responses for upcoming calls."""
        self._responses.extend(responses)

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        response = self._responses.pop(0) if self._responses else self._default
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def call_count(self) -> int:
        return len(self.requests)
