"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from metaprompt.api.middleware.error_handler import register_error_handlers
from metaprompt.api.routes import form, generation, health
from metaprompt.core.config import AppSettings
from metaprompt.core.startup_checks import validate_settings
from metaprompt.hooks import setup_logging
from metaprompt.inference.client import LiteLLMGenerationClient
from metaprompt.ingestion.document_text import DefaultDocumentTextExtractor
from metaprompt.services.form_session import FormSession


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("metaprompt-forge")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


def create_app(
    settings: AppSettings | None = None,
    session: FormSession | None = None,
) -> FastAPI:
    """Build the application.

    With no *session* the lifespan validates settings and wires the LiteLLM
    client and the built-in document extractor.  Tests pass a session built
    on fakes instead.
    """
    app_settings = settings or AppSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application startup/shutdown lifecycle."""
        setup_logging(app_settings.observability)
        if session is None:
            validate_settings(app_settings)
            app.state.session = FormSession(
                LiteLLMGenerationClient(app_settings.llm),
                DefaultDocumentTextExtractor(),
                app_settings,
            )
        else:
            app.state.session = session
        app.state.settings = app_settings
        yield

    app = FastAPI(
        title=app_settings.api.title,
        description=app_settings.api.description,
        version=_get_version(),
        lifespan=lifespan,
    )
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(form.router, prefix="/api")
    app.include_router(generation.router, prefix="/api")
    return app


app = create_app()
