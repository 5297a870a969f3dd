"""Form state model."""

from __future__ import annotations

from metaprompt.form.state import FormState

__all__ = ["FormState"]
