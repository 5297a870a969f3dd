"""Tests for generation response parsing and error classification."""

from __future__ import annotations

import json

import litellm
import pytest

from metaprompt.exceptions import (
    EmptyResponseError,
    InvalidApiKeyError,
    InvalidStructureError,
    MalformedRequestError,
    NetworkError,
    QuotaExceededError,
    RecitationBlockedError,
    SafetyBlockedError,
    ServiceInternalError,
    StoppedOtherError,
    TruncatedOutputError,
    UnclassifiedApiError,
)
from metaprompt.generation.classifier import (
    classify_exception,
    classify_stop,
    parse_generation_result,
    strip_harm_prefix,
)
from metaprompt.inference.protocols import GenerationResult
from tests.fakes.fake_generation import artifact_payload, json_result


class _StatusError(Exception):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class TestParse:
    def test_valid_artifact(self) -> None:
        artifact = parse_generation_result(json_result(artifact_payload(summary="Ringkasan")))
        assert artifact.summary == "Ringkasan"
        assert artifact.main_prompt
        assert artifact.ui_spec

    def test_surrounding_whitespace_is_tolerated(self) -> None:
        text = "\n  " + json.dumps(artifact_payload()) + "\n"
        artifact = parse_generation_result(GenerationResult(text=text, finish_reason="STOP"))
        assert artifact.checklist

    def test_not_json(self) -> None:
        with pytest.raises(InvalidStructureError) as exc_info:
            parse_generation_result(GenerationResult(text="Here is your prompt:", finish_reason="STOP"))
        assert exc_info.value.raw_response == "Here is your prompt:"

    def test_missing_field(self) -> None:
        payload = artifact_payload()
        del payload["variantB"]
        with pytest.raises(InvalidStructureError):
            parse_generation_result(json_result(payload))

    def test_extra_field(self) -> None:
        with pytest.raises(InvalidStructureError):
            parse_generation_result(json_result(artifact_payload(bonus="x")))

    def test_non_string_field(self) -> None:
        with pytest.raises(InvalidStructureError):
            parse_generation_result(json_result(artifact_payload(summary=42)))

    def test_json_array(self) -> None:
        with pytest.raises(InvalidStructureError):
            parse_generation_result(GenerationResult(text="[]", finish_reason="STOP"))


class TestStopReasons:
    def test_safety_block_strips_prefix(self) -> None:
        result = GenerationResult(finish_reason="SAFETY", blocked_categories=["HARM_CATEGORY_HATE"])
        with pytest.raises(SafetyBlockedError) as exc_info:
            parse_generation_result(result)
        assert exc_info.value.categories == ["HATE"]
        assert "Blocked categories: HATE" in exc_info.value.message

    def test_safety_block_without_categories(self) -> None:
        error = classify_stop(GenerationResult(finish_reason="SAFETY"))
        assert isinstance(error, SafetyBlockedError)
        assert "Unknown" in error.message

    @pytest.mark.parametrize(
        ("reason", "error_cls"),
        [
            ("RECITATION", RecitationBlockedError),
            ("MAX_TOKENS", TruncatedOutputError),
            ("", EmptyResponseError),
        ],
    )
    def test_reason_mapping(self, reason: str, error_cls: type) -> None:
        with pytest.raises(error_cls):
            parse_generation_result(GenerationResult(text="   ", finish_reason=reason))

    def test_other_reason_is_named(self) -> None:
        error = classify_stop(GenerationResult(finish_reason="BLOCKLIST"))
        assert isinstance(error, StoppedOtherError)
        assert error.reason == "BLOCKLIST"
        assert "BLOCKLIST" in error.message

    def test_empty_text_with_normal_stop_is_named(self) -> None:
        with pytest.raises(StoppedOtherError) as exc_info:
            parse_generation_result(GenerationResult(text="", finish_reason="STOP"))
        assert exc_info.value.reason == "STOP"

    def test_strip_harm_prefix(self) -> None:
        assert strip_harm_prefix(["HARM_CATEGORY_HATE", "DANGEROUS", "HARM_CATEGORY_SEXUAL"]) == [
            "HATE",
            "DANGEROUS",
            "SEXUAL",
        ]


class TestClassifyException:
    @pytest.mark.parametrize(
        ("message", "error_cls"),
        [
            ("[400] API key not valid. Please pass a valid API key.", InvalidApiKeyError),
            ("got status 429 from upstream", QuotaExceededError),
            ("RESOURCE EXHAUSTED: try later", QuotaExceededError),
            ("HTTP 500 from backend", ServiceInternalError),
            ("An internal error has occurred", ServiceInternalError),
            ("400 bad things", MalformedRequestError),
            ("Invalid argument: contents", MalformedRequestError),
            ("TypeError: fetch failed", NetworkError),
            ("a network error happened", NetworkError),
        ],
    )
    def test_message_rules(self, message: str, error_cls: type) -> None:
        assert isinstance(classify_exception(RuntimeError(message)), error_cls)

    def test_api_key_rule_wins_over_status_fragment(self) -> None:
        # "400" also matches the malformed-request rule; the key rule is checked first
        error = classify_exception(RuntimeError("400 API key not valid"))
        assert isinstance(error, InvalidApiKeyError)

    def test_unmatched_message(self) -> None:
        error = classify_exception(RuntimeError("Something odd"))
        assert isinstance(error, UnclassifiedApiError)
        assert error.detail == "Something odd"
        assert "Something odd" in error.message

    @pytest.mark.parametrize(
        ("status", "error_cls"),
        [
            (401, InvalidApiKeyError),
            (403, InvalidApiKeyError),
            (429, QuotaExceededError),
            (500, ServiceInternalError),
            (503, ServiceInternalError),
            (400, MalformedRequestError),
            (408, NetworkError),
        ],
    )
    def test_status_codes(self, status: int, error_cls: type) -> None:
        assert isinstance(classify_exception(_StatusError("upstream said no", status)), error_cls)

    def test_bad_request_mentioning_key(self) -> None:
        error = classify_exception(_StatusError("API key expired", 400))
        assert isinstance(error, InvalidApiKeyError)

    def test_unknown_status_falls_back_to_message(self) -> None:
        error = classify_exception(_StatusError("resource exhausted", 418))
        assert isinstance(error, QuotaExceededError)

    def test_builtin_network_errors(self) -> None:
        assert isinstance(classify_exception(ConnectionError("reset")), NetworkError)
        assert isinstance(classify_exception(TimeoutError()), NetworkError)

    def test_litellm_connection_error(self) -> None:
        exc = litellm.APIConnectionError(
            message="connection refused", llm_provider="gemini", model="gemini-2.5-flash"
        )
        assert isinstance(classify_exception(exc), NetworkError)

    def test_litellm_timeout(self) -> None:
        exc = litellm.Timeout(message="timed out", model="gemini-2.5-flash", llm_provider="gemini")
        assert isinstance(classify_exception(exc), NetworkError)

    def test_already_classified_passes_through(self) -> None:
        original = QuotaExceededError()
        assert classify_exception(original) is original
