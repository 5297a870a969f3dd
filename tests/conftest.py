"""Shared fixtures for metaprompt tests."""

from __future__ import annotations

import pytest

from metaprompt.core.config import AppSettings, LLMConfig
from metaprompt.form.state import FormState
from metaprompt.services.form_session import FormSession
from metaprompt.tasks.registry import TaskSchemaRegistry, get_registry
from tests.fakes.fake_document_extractor import FakeDocumentExtractor
from tests.fakes.fake_generation import FakeGenerationClient


@pytest.fixture
def settings() -> AppSettings:
    """Default test settings (fake key, no real LLM)."""
    return AppSettings(llm=LLMConfig(model="gemini/gemini-2.5-flash", api_key="test-key"))


@pytest.fixture
def registry() -> TaskSchemaRegistry:
    return get_registry()


@pytest.fixture
def state(registry: TaskSchemaRegistry) -> FormState:
    return FormState.initialize(registry)


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def fake_extractor() -> FakeDocumentExtractor:
    return FakeDocumentExtractor()


@pytest.fixture
def session(
    fake_client: FakeGenerationClient,
    fake_extractor: FakeDocumentExtractor,
    settings: AppSettings,
    registry: TaskSchemaRegistry,
) -> FormSession:
    return FormSession(fake_client, fake_extractor, settings, registry)

