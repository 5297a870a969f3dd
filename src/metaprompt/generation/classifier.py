"""Response classifier: turns a generation outcome into an artifact or a typed error.

Three outcome families are handled:

* text present → strict parse into :class:`GeneratedArtifact`
  (``InvalidStructureError`` on failure);
* no text → the stop reason decides (safety, recitation, length limit,
  other, or nothing at all);
* transport failure → :func:`classify_exception`, which checks structured
  signals (HTTP status, exception type) first and falls back to matching
  lower-cased message fragments.

Every classified error is terminal for the submission; nothing here retries.
"""

from __future__ import annotations

import asyncio
import json
import logging

from pydantic import ValidationError

from metaprompt.exceptions import (
    EmptyResponseError,
    GenerationError,
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
from metaprompt.inference.protocols import (
    FINISH_MAX_TOKENS,
    FINISH_RECITATION,
    FINISH_SAFETY,
    GenerationResult,
)
from metaprompt.models import GeneratedArtifact

log = logging.getLogger(__name__)

_HARM_PREFIX = "HARM_CATEGORY_"

# Ordered: first match wins
_MESSAGE_RULES: tuple[tuple[tuple[str, ...], type[GenerationError]], ...] = (
    (("api key not valid",), InvalidApiKeyError),
    (("429", "resource exhausted"), QuotaExceededError),
    (("500", "internal error"), ServiceInternalError),
    (("400", "invalid argument"), MalformedRequestError),
    (("fetch failed", "network error"), NetworkError),
)


def parse_generation_result(result: GenerationResult) -> GeneratedArtifact:
    """Parse a successful call or raise the error its stop reason implies.

    Raises:
        InvalidStructureError: Text present but not a valid artifact.
        SafetyBlockedError, RecitationBlockedError, TruncatedOutputError,
        StoppedOtherError, EmptyResponseError: No text came back.
    """
    text = result.text.strip()
    if not text:
        raise classify_stop(result)

    try:
        data = json.loads(text)
        return GeneratedArtifact.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        log.error("Failed to parse generation response: %s", exc)
        log.debug("Raw response text: %s", text)
        raise InvalidStructureError(raw_response=result.text) from exc


def classify_stop(result: GenerationResult) -> GenerationError:
    """Error for an empty response, chosen by its stop reason."""
    reason = result.finish_reason.strip().upper()
    if reason == FINISH_SAFETY:
        return SafetyBlockedError(strip_harm_prefix(result.blocked_categories))
    if reason == FINISH_RECITATION:
        return RecitationBlockedError()
    if reason == FINISH_MAX_TOKENS:
        return TruncatedOutputError()
    if reason:
        return StoppedOtherError(reason)
    return EmptyResponseError()


def strip_harm_prefix(categories: list[str]) -> list[str]:
    """``HARM_CATEGORY_HATE`` → ``HATE``."""
    return [c[len(_HARM_PREFIX):] if c.startswith(_HARM_PREFIX) else c for c in categories]


def classify_exception(exc: BaseException) -> GenerationError:
    """Map a transport or service failure onto the error taxonomy.

    Already-classified errors are returned unchanged.
    """
    if isinstance(exc, GenerationError):
        return exc

    structured = _classify_structured(exc)
    if structured is not None:
        return structured

    message = str(exc).lower()
    for fragments, error_cls in _MESSAGE_RULES:
        if any(fragment in message for fragment in fragments):
            return error_cls()

    return UnclassifiedApiError(str(exc) or type(exc).__name__)


def _classify_structured(exc: BaseException) -> GenerationError | None:
    import litellm

    # Connection errors carry a 500 status in LiteLLM, so check the type first
    if isinstance(exc, (litellm.APIConnectionError, litellm.Timeout)):
        return NetworkError()
    if isinstance(exc, (ConnectionError, TimeoutError, asyncio.TimeoutError)):
        return NetworkError()

    status = getattr(exc, "status_code", None)
    if not isinstance(status, int):
        return None
    if status in (401, 403):
        return InvalidApiKeyError()
    if status == 429:
        return QuotaExceededError()
    if status >= 500:
        return ServiceInternalError()
    if status == 400:
        if "api key" in str(exc).lower():
            return InvalidApiKeyError()
        return MalformedRequestError()
    if status == 408:
        return NetworkError()
    return None
