"""Exception hierarchy for metaprompt.

Every failure the form pipeline can surface is a ``MetaPromptError`` with a
stable ``error_code`` (used for API responses and log tagging) and a
user-facing message.  Nothing here is fatal to the process: each error ends
the current operation and leaves the session idle and resubmittable.
"""

from __future__ import annotations


class MetaPromptError(Exception):
    """Base exception for all metaprompt errors."""

    error_code = "metaprompt_error"
    default_message = ""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message or self.error_code)

    @property
    def message(self) -> str:
        return str(self)


# ── Form / input errors ──────────────────────────────────────────────


class FieldShapeError(MetaPromptError, ValueError):
    """A value does not match the shape of the field it was written to."""

    error_code = "invalid_field"


class FormIncompleteError(MetaPromptError):
    """Visible required fields are blank."""

    error_code = "form_incomplete"

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Required fields are empty: {', '.join(self.missing)}")


class InputValidationError(MetaPromptError):
    """Auto-fill was requested without any usable input."""

    error_code = "validation_error"


class OperationInProgressError(MetaPromptError):
    """Another submission of the same kind is still in flight."""

    error_code = "operation_in_progress"


# ── Document conversion / aggregation ────────────────────────────────


class DocumentConversionError(MetaPromptError):
    """A single uploaded file could not be converted to text."""

    error_code = "conversion_failed"

    def __init__(self, filename: str, cause: str) -> None:
        self.filename = filename
        self.cause = cause
        super().__init__(f"Gagal memproses {filename}: {cause}")


class UnsupportedFileTypeError(DocumentConversionError):
    """The file extension is not one of the supported document types."""

    error_code = "unsupported_file_type"


class AllFilesFailedError(MetaPromptError):
    """Every uploaded file failed to convert; nothing was extracted."""

    error_code = "all_files_failed"

    def __init__(self, filenames: list[str]) -> None:
        self.filenames = list(filenames)
        super().__init__(
            "None of the uploaded files could be processed: " + ", ".join(self.filenames)
        )


class ExtractionServiceError(MetaPromptError):
    """The extraction strategy call failed; no fields were merged."""

    error_code = "extraction_failed"

    def __init__(self, message: str, cause: MetaPromptError | None = None) -> None:
        self.cause = cause
        super().__init__(message)


# ── Generation outcome errors ────────────────────────────────────────


class GenerationError(MetaPromptError):
    """Base for every classified outcome of a failed generation call."""

    error_code = "generation_error"


class InvalidStructureError(GenerationError):
    """Generated text could not be parsed into a GeneratedArtifact."""

    error_code = "invalid_structure"
    default_message = "The AI returned an invalid data structure. Please try again."

    def __init__(self, message: str = "", raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response


class SafetyBlockedError(GenerationError):
    """Request blocked for safety reasons."""

    error_code = "safety_blocked"

    def __init__(self, categories: list[str] | None = None) -> None:
        self.categories = list(categories or [])
        listed = ", ".join(self.categories) or "Unknown"
        super().__init__(
            f"Request blocked for safety reasons. Blocked categories: {listed}. "
            "Please adjust your input."
        )


class RecitationBlockedError(GenerationError):
    """Generation stopped because the output recited a known source."""

    error_code = "recitation_blocked"
    default_message = (
        "Request blocked due to potential recitation. The model's response would have "
        "been too similar to a source on the web. Please try a different prompt."
    )


class TruncatedOutputError(GenerationError):
    """Generation hit the output token limit before producing content."""

    error_code = "truncated_output"
    default_message = (
        "The response was stopped because it reached the maximum token limit. "
        "Try asking for a shorter response."
    )


class StoppedOtherError(GenerationError):
    """The request was stopped for a provider-specific reason."""

    error_code = "stopped_other"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(
            f"The request was stopped for the following reason: {reason}. "
            "Please adjust your input and try again."
        )


class EmptyResponseError(GenerationError):
    """No text and no stop reason came back."""

    error_code = "empty_response"
    default_message = (
        "Received an empty response from the API. This could be due to content "
        "filters or a lack of a specific answer from the model."
    )


# ── Transport / service errors ───────────────────────────────────────


class ApiError(GenerationError):
    """Base for transport-level failures of the generation service."""

    error_code = "api_error"


class InvalidApiKeyError(ApiError):
    """Credentials were rejected by the provider."""

    error_code = "invalid_api_key"
    default_message = "The API key is invalid. Please ensure it is correctly configured in your environment."


class QuotaExceededError(ApiError):
    """Rate limit or quota exhausted."""

    error_code = "quota_exceeded"
    default_message = "You have exceeded your request quota. Please wait a moment and try again."


class ServiceInternalError(ApiError):
    """Provider-side 5xx failure."""

    error_code = "service_internal_error"
    default_message = "The AI service encountered an internal error. Please try again later."


class MalformedRequestError(ApiError):
    """Provider rejected the request as invalid."""

    error_code = "malformed_request"
    default_message = "The request sent to the AI service was malformed. Please check the input."


class NetworkError(ApiError):
    """The provider could not be reached."""

    error_code = "network_error"
    default_message = "A network error occurred. Please check your internet connection and try again."


class UnclassifiedApiError(ApiError):
    """An API error that matched no known category."""

    error_code = "unclassified_api_error"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"An API error occurred: {detail}")


__all__ = [
    "MetaPromptError",
    "FieldShapeError",
    "FormIncompleteError",
    "InputValidationError",
    "OperationInProgressError",
    "DocumentConversionError",
    "UnsupportedFileTypeError",
    "AllFilesFailedError",
    "ExtractionServiceError",
    "GenerationError",
    "InvalidStructureError",
    "SafetyBlockedError",
    "RecitationBlockedError",
    "TruncatedOutputError",
    "StoppedOtherError",
    "EmptyResponseError",
    "ApiError",
    "InvalidApiKeyError",
    "QuotaExceededError",
    "ServiceInternalError",
    "MalformedRequestError",
    "NetworkError",
    "UnclassifiedApiError",
]
