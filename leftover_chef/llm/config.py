from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

# The service reads its .env from the directory it is started in
load_dotenv(find_dotenv(usecwd=True))


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


@dataclass(frozen=True)
class LLMConfig:
    """
    Settings for leftover-recipe generation.

    ``enabled`` and ``model`` can be overridden with
    ``LEFTOVER_CHEF_GENERATION_ENABLED`` and ``LEFTOVER_CHEF_LLM_MODEL``.
    With ``fallback_on_error`` off, a failed generation raises instead of
    returning the template recipe.
    """

    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("LEFTOVER_CHEF_LLM_MODEL", "llama-3.3-70b-versatile")
    timeout: float = 20.0
    max_retries: int = 1
    max_tokens: int = 1000
    temperature: float = 0.7
    enabled: bool = _env_flag("LEFTOVER_CHEF_GENERATION_ENABLED", True)
    fallback_on_error: bool = True


DEFAULT_LLM_CONFIG = LLMConfig()
