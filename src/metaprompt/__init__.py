"""metaprompt: task-adaptive form back-end for meta-prompt generation.

Typical use::

    from metaprompt import (
        AppSettings, FormSession,
        LiteLLMGenerationClient, DefaultDocumentTextExtractor,
    )

    settings = AppSettings()
    session = FormSession(
        LiteLLMGenerationClient(settings.llm),
        DefaultDocumentTextExtractor(),
        settings,
    )
    session.set_field("task_type", "document")
    session.set_field("goal", "Tulis SOP onboarding")
    artifact = await session.generate()
"""

from __future__ import annotations

from metaprompt.core.config import AppSettings
from metaprompt.form.state import FormState
from metaprompt.inference.client import LiteLLMGenerationClient
from metaprompt.ingestion.document_text import DefaultDocumentTextExtractor
from metaprompt.models import AggregationResult, GeneratedArtifact, PartialFilesFailed, UploadedFile
from metaprompt.services.aggregation_service import InputAggregationService
from metaprompt.services.form_session import FormSession
from metaprompt.tasks.fields import TaskType
from metaprompt.tasks.registry import TaskSchemaRegistry, get_registry

__all__ = [
    "AggregationResult",
    "AppSettings",
    "DefaultDocumentTextExtractor",
    "FormSession",
    "FormState",
    "GeneratedArtifact",
    "InputAggregationService",
    "LiteLLMGenerationClient",
    "PartialFilesFailed",
    "TaskSchemaRegistry",
    "TaskType",
    "UploadedFile",
    "get_registry",
]
