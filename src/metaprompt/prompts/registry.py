"""Prompt lookup over the template modules in ``metaprompt.prompts.templates``.

Usage::

    prompt = get_prompt("extraction", "IDEA_EXPANSION_PROMPT")

Each template module stores its prompts in a ``_PROMPT_DATA`` dict; this
module reads that dict directly so the modules' own ``__getattr__`` can
delegate back here without recursing.
"""

from __future__ import annotations

import importlib
import logging
from types import ModuleType

logger = logging.getLogger(__name__)

_modules: dict[str, ModuleType] = {}


def get_prompt(category: str, name: str) -> str:
    """Look up a prompt template by category (module name) and constant name.

    Raises:
        KeyError: If the module or the prompt does not exist.
    """
    module = _modules.get(category)
    if module is None:
        module_path = f"metaprompt.prompts.templates.{category}"
        try:
            module = importlib.import_module(module_path)
        except ModuleNotFoundError as exc:
            raise KeyError(f"Prompt module not found: {module_path}") from exc
        _modules[category] = module
        logger.debug("Loaded prompt module %s", module_path)

    data: dict[str, str] | None = getattr(module, "_PROMPT_DATA", None)
    if data is not None and name in data:
        return data[name]
    raise KeyError(f"Prompt {name!r} not found in {category}")
