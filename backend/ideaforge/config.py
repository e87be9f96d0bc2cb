"""Runtime configuration — all values read from environment with safe defaults.

Variables:
  BLUEPRINT_BACKEND             — "template" (default) or "model"
  OPENAI_API_KEY                — required only for the model backend
  OPENAI_MODEL                  — default gpt-4.1
  OPENAI_API_URL                — chat completions endpoint
  OPENAI_TEMPERATURE            — default 0.7
  OPENAI_REQUEST_TIMEOUT        — seconds, default 40
  OPENAI_MAX_COMPLETION_TOKENS  — default 4000
  WIZARD_MIN_LOADING_SECONDS    — loading floor, default 3.0
  WIZARD_SESSION_TTL_SECONDS    — idle session eviction, default 1800
  DEBUG                         — "true" exposes error details in 500 responses
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .constants import (
    BACKEND_TEMPLATE,
    BLUEPRINT_BACKENDS,
    DEFAULT_MIN_LOADING_SECONDS,
    DEFAULT_SESSION_TTL_SECONDS,
)

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment taken when the application starts."""

    blueprint_backend: str = BACKEND_TEMPLATE
    openai_api_key: str = ""
    openai_model: str = "gpt-4.1"
    openai_api_url: str = OPENAI_API_URL
    openai_temperature: float = 0.7
    openai_timeout: float = 40.0
    openai_max_tokens: int = 4000
    min_loading_seconds: float = DEFAULT_MIN_LOADING_SECONDS
    session_ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS
    debug: bool = False

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)


def load_settings() -> Settings:
    """Load `.env`, then build a Settings snapshot from the environment."""
    load_dotenv()

    backend = os.getenv("BLUEPRINT_BACKEND", BACKEND_TEMPLATE).strip().lower()
    if backend not in BLUEPRINT_BACKENDS:
        print(f"⚠️  [CONFIG] Unknown BLUEPRINT_BACKEND={backend!r} — using {BACKEND_TEMPLATE}")
        backend = BACKEND_TEMPLATE

    return Settings(
        blueprint_backend=backend,
        openai_api_key=os.getenv("OPENAI_API_KEY", "").strip(),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4.1").strip(),
        openai_api_url=os.getenv("OPENAI_API_URL", OPENAI_API_URL).strip(),
        openai_temperature=_env_float("OPENAI_TEMPERATURE", 0.7),
        openai_timeout=_env_float("OPENAI_REQUEST_TIMEOUT", 40.0),
        openai_max_tokens=_env_int("OPENAI_MAX_COMPLETION_TOKENS", 4000),
        min_loading_seconds=max(0.0, _env_float("WIZARD_MIN_LOADING_SECONDS", DEFAULT_MIN_LOADING_SECONDS)),
        session_ttl_seconds=max(0.0, _env_float("WIZARD_SESSION_TTL_SECONDS", DEFAULT_SESSION_TTL_SECONDS)),
        debug=os.getenv("DEBUG", "false").lower() == "true",
    )
