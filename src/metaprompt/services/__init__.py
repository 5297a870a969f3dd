"""Application services: auto-fill aggregation and the form session."""

from __future__ import annotations

from metaprompt.services.aggregation_service import InputAggregationService
from metaprompt.services.form_session import FormSession

__all__ = ["FormSession", "InputAggregationService"]
