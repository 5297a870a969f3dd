"""Unit tests for data models."""

import pytest
from pydantic import ValidationError

from metaprompt.exceptions import (
    AllFilesFailedError,
    DocumentConversionError,
    FormIncompleteError,
    InvalidStructureError,
    MetaPromptError,
    QuotaExceededError,
)
from metaprompt.models import AggregationResult, ExtractionStrategyName, GeneratedArtifact, PartialFilesFailed, UploadedFile
from tests.fakes.fake_generation import artifact_payload


class TestUploadedFile:
    def test_extension(self):
        assert UploadedFile(filename="Report.Final.PDF", content=b"").extension == "pdf"
        assert UploadedFile(filename="Makefile", content=b"").extension == ""

    def test_content_hidden_from_repr(self):
        assert "secret-bytes" not in repr(UploadedFile(filename="a.txt", content=b"secret-bytes"))


class TestGeneratedArtifact:
    def test_accepts_camel_case(self):
        artifact = GeneratedArtifact.model_validate(artifact_payload())
        assert artifact.main_prompt.startswith("Peran")
        assert artifact.variant_a == "Versi konservatif"

    def test_dumps_camel_case(self):
        dumped = GeneratedArtifact.model_validate(artifact_payload()).model_dump(by_alias=True)
        assert list(dumped) == [
            "summary",
            "techniques",
            "mainPrompt",
            "variantA",
            "variantB",
            "uiSpec",
            "checklist",
            "example",
        ]

    def test_ui_spec_stays_a_string(self):
        artifact = GeneratedArtifact.model_validate(artifact_payload(uiSpec='{"a": 1}'))
        assert artifact.ui_spec == '{"a": 1}'

    def test_rejects_extra_keys(self):
        with pytest.raises(ValidationError):
            GeneratedArtifact.model_validate(artifact_payload(extra="x"))


class TestAggregationModels:
    def test_partial_warning_message(self):
        warning = PartialFilesFailed(filenames=["a.pdf", "b.docx"], causes={"a.pdf": "rusak"})
        assert warning.error_code == "partial_files_failed"
        assert warning.message == "Some files could not be processed: a.pdf, b.docx"

    def test_aggregation_defaults(self):
        result = AggregationResult(strategy=ExtractionStrategyName.IDEA_EXPANSION)
        assert result.applied is True
        assert result.fields == {}
        assert result.warning is None


class TestErrors:
    def test_codes_and_hierarchy(self):
        assert QuotaExceededError().error_code == "quota_exceeded"
        assert isinstance(QuotaExceededError(), MetaPromptError)
        assert InvalidStructureError().message.startswith("The AI returned an invalid data structure")

    def test_error_payloads(self):
        assert FormIncompleteError(["goal"]).missing == ["goal"]
        err = DocumentConversionError("a.pdf", "rusak")
        assert err.filename == "a.pdf"
        assert "a.pdf" in err.message
        assert AllFilesFailedError(["a", "b"]).filenames == ["a", "b"]
