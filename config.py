"""Service configuration: remote model settings, API key, paths."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
ROOT_DIR = Path(__file__).parent
OUTPUT_DIR = ROOT_DIR / os.getenv("OUTPUT_DIR", "outputs")

# ---------------------------------------------------------------------------
# Anthropic Messages API
# ---------------------------------------------------------------------------
# CLAUDE_API_KEY is accepted for compatibility with older .env files.
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "") or os.getenv("CLAUDE_API_KEY", "")
ANTHROPIC_API_URL = os.getenv("ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages")
ANTHROPIC_VERSION = "2023-06-01"

ANTHROPIC_FRONTIER = "claude-sonnet-4-20250514"

GENERATION_MODEL = os.getenv("GENERATION_MODEL", ANTHROPIC_FRONTIER)
GENERATION_MAX_TOKENS = int(os.getenv("GENERATION_MAX_TOKENS", "4000"))
GENERATION_TEMPERATURE = float(os.getenv("GENERATION_TEMPERATURE", "0.7"))

# Transport errors (connect/read failures) are retried; HTTP status errors never are.
REMOTE_TIMEOUT_SECONDS = float(os.getenv("REMOTE_TIMEOUT_SECONDS", "60"))
REMOTE_MAX_ATTEMPTS = int(os.getenv("REMOTE_MAX_ATTEMPTS", "2"))

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class GenerationSettings(BaseModel):
    """Snapshot of the remote-generation settings for one attempt.

    Passed explicitly into the generator so callers (and tests) never have
    to touch process environment to switch between the remote and the
    fallback paths.
    """

    api_key: str = ""
    api_url: str = ANTHROPIC_API_URL
    api_version: str = ANTHROPIC_VERSION
    model: str = ANTHROPIC_FRONTIER
    max_tokens: int = 4000
    temperature: float = 0.7
    timeout_seconds: float = 60.0
    max_attempts: int = 2

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())


def get_generation_settings(**overrides) -> GenerationSettings:
    """Return settings built from the module constants, with overrides applied."""
    values = {
        "api_key": ANTHROPIC_API_KEY,
        "api_url": ANTHROPIC_API_URL,
        "api_version": ANTHROPIC_VERSION,
        "model": GENERATION_MODEL,
        "max_tokens": GENERATION_MAX_TOKENS,
        "temperature": GENERATION_TEMPERATURE,
        "timeout_seconds": REMOTE_TIMEOUT_SECONDS,
        "max_attempts": REMOTE_MAX_ATTEMPTS,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return GenerationSettings(**values)
