"""Tests for the LiteLLM structured generation client."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from metaprompt.core.config import LLMConfig
from metaprompt.inference.client import LiteLLMGenerationClient, _normalise_finish_reason
from metaprompt.inference.protocols import GenerationRequest, IStructuredGenerationClient


def _litellm_response(
    content: str | None,
    finish_reason: str | None = "stop",
    hidden: dict[str, Any] | None = None,
) -> MagicMock:
    """Build a mock LiteLLM response object."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    choice.finish_reason = finish_reason
    response = MagicMock()
    response.choices = [choice]
    response.usage = SimpleNamespace(prompt_tokens=12, completion_tokens=30, total_tokens=42)
    response._hidden_params = hidden or {}
    return response


def _request(**overrides: Any) -> GenerationRequest:
    params: dict[str, Any] = {
        "system_instruction": "system",
        "user_payload": "payload",
        "output_schema": {"type": "object"},
        "schema_name": "generated_artifact",
    }
    params.update(overrides)
    return GenerationRequest(**params)


@pytest.fixture
def client() -> LiteLLMGenerationClient:
    return LiteLLMGenerationClient(
        LLMConfig(model="gemini/gemini-2.5-flash", api_key="secret", temperature=0.6)
    )


def test_satisfies_protocol(client: LiteLLMGenerationClient) -> None:
    assert isinstance(client, IStructuredGenerationClient)
    assert client.model == "gemini/gemini-2.5-flash"


@pytest.mark.asyncio
class TestGenerate:
    async def test_request_shape(self, client: LiteLLMGenerationClient) -> None:
        mock = AsyncMock(return_value=_litellm_response('{"a": 1}'))
        with patch("litellm.acompletion", mock):
            await client.generate(_request())

        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "gemini/gemini-2.5-flash"
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "payload"},
        ]
        fmt = kwargs["response_format"]
        assert fmt["type"] == "json_schema"
        assert fmt["json_schema"] == {
            "name": "generated_artifact",
            "schema": {"type": "object"},
            "strict": True,
        }
        assert kwargs["api_key"] == "secret"
        assert kwargs["temperature"] == 0.6
        assert "max_tokens" not in kwargs

    async def test_request_temperature_overrides_default(self, client: LiteLLMGenerationClient) -> None:
        mock = AsyncMock(return_value=_litellm_response("{}"))
        with patch("litellm.acompletion", mock):
            await client.generate(_request(temperature=0.1))
        assert mock.call_args.kwargs["temperature"] == 0.1

    async def test_no_api_key_kwarg_when_unset(self) -> None:
        client = LiteLLMGenerationClient(LLMConfig(model="ollama/llama3", api_key="", max_output_tokens=512))
        mock = AsyncMock(return_value=_litellm_response("{}"))
        with patch("litellm.acompletion", mock):
            await client.generate(_request())
        assert "api_key" not in mock.call_args.kwargs
        assert mock.call_args.kwargs["max_tokens"] == 512

    async def test_successful_result(self, client: LiteLLMGenerationClient) -> None:
        with patch("litellm.acompletion", AsyncMock(return_value=_litellm_response('{"x": "y"}'))):
            result = await client.generate(_request())
        assert result.text == '{"x": "y"}'
        assert result.finish_reason == "STOP"
        assert result.blocked_categories == []
        assert result.usage == {"prompt_tokens": 12, "completion_tokens": 30, "total_tokens": 42}

    async def test_blocked_categories_from_hidden_params(self, client: LiteLLMGenerationClient) -> None:
        hidden = {
            "vertex_ai_safety_results": [
                [
                    {"category": "HARM_CATEGORY_HATE", "blocked": True},
                    {"category": "HARM_CATEGORY_HARASSMENT", "blocked": False},
                ]
            ]
        }
        response = _litellm_response(None, finish_reason="content_filter", hidden=hidden)
        with patch("litellm.acompletion", AsyncMock(return_value=response)):
            result = await client.generate(_request())
        assert result.text == ""
        assert result.finish_reason == "SAFETY"
        assert result.blocked_categories == ["HARM_CATEGORY_HATE"]

    async def test_categories_ignored_when_text_present(self, client: LiteLLMGenerationClient) -> None:
        hidden = {"vertex_ai_safety_results": [{"category": "HARM_CATEGORY_HATE", "blocked": True}]}
        response = _litellm_response("{}", hidden=hidden)
        with patch("litellm.acompletion", AsyncMock(return_value=response)):
            result = await client.generate(_request())
        assert result.blocked_categories == []

    async def test_no_choices(self, client: LiteLLMGenerationClient) -> None:
        response = _litellm_response("")
        response.choices = []
        with patch("litellm.acompletion", AsyncMock(return_value=response)):
            result = await client.generate(_request())
        assert result.text == ""
        assert result.finish_reason == ""

    async def test_transport_errors_propagate(self, client: LiteLLMGenerationClient) -> None:
        with patch("litellm.acompletion", AsyncMock(side_effect=ConnectionError("fetch failed"))):
            with pytest.raises(ConnectionError):
                await client.generate(_request())


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("stop", "STOP"),
        ("length", "MAX_TOKENS"),
        ("content_filter", "SAFETY"),
        ("recitation", "RECITATION"),
        ("OTHER", "OTHER"),
        (None, ""),
        ("", ""),
    ],
)
def test_normalise_finish_reason(raw: str | None, expected: str) -> None:
    assert _normalise_finish_reason(raw) == expected
