"""Configuration constants and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. The whisper.cpp install location, model name and
version live here, not buried in the runner.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values read from the environment with defaults.

RULES:
- All defaults can be overridden via environment variables (or .env)
- WHISPER_INSTALL_PATH points at an existing whisper.cpp checkout/build;
  installing whisper.cpp or downloading models is not handled here
- whisper.cpp only reads 16 kHz WAV input, so .wav is the only
  supported audio extension
- An unknown LOG_LEVEL falls back to INFO instead of failing at startup
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# whisper.cpp
# ---------------------------------------------------------------------------

WHISPER_INSTALL_PATH = Path(os.getenv("WHISPER_INSTALL_PATH", "whisper.cpp"))
WHISPER_MODEL = os.getenv("WHISPER_MODEL", "medium.en")
WHISPER_VERSION = os.getenv("WHISPER_VERSION", "1.5.5")
WHISPER_VERBOSE = os.getenv("WHISPER_VERBOSE", "false").lower() == "true"
WHISPER_LANGUAGE: str | None = os.getenv("WHISPER_LANGUAGE") or None
WHISPER_TIMEOUT_S = float(os.getenv("WHISPER_TIMEOUT_S", "1800"))

SUPPORTED_AUDIO_FORMATS: set[str] = {".wav"}
"""Audio file extensions whisper.cpp accepts directly (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_log_level(value: str | None) -> str:
    """Normalize a LOG_LEVEL value, falling back to INFO when unknown."""
    level = (value or "").strip().upper()
    return level if level in LOG_LEVELS else "INFO"


LOG_LEVEL = resolve_log_level(os.getenv("LOG_LEVEL"))
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
