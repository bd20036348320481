"""Load settings from environment (.env and env vars)."""

from __future__ import annotations

import os
from pathlib import Path

# Load .env from backend root if present
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
if _env_path.exists():
    from dotenv import load_dotenv
    load_dotenv(_env_path)


def _str(key: str, default: str = "") -> str:
    return (os.environ.get(key) or "").strip() or default


# LLM provider: "gemini" or "openai"
LLM_PROVIDER = _str("LLM_PROVIDER", "gemini").lower()

# Gemini
GEMINI_API_KEY = _str("GEMINI_API_KEY")
GEMINI_MODEL = _str("GEMINI_MODEL") or "gemini-pro"

# OpenAI
OPENAI_API_KEY = _str("OPENAI_API_KEY")
LLM_MODEL = _str("LLM_MODEL") or "gpt-4o-mini"

# Plan text convention: "emoji" or "markdown"
PLAN_MARKER_STYLE = _str("PLAN_MARKER_STYLE", "emoji").lower()

LOG_LEVEL = _str("LOG_LEVEL", "INFO").upper()
