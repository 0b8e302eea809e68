"""
Life Tracker — Centralized configuration.

Loads all settings from .env and validates them.
Every setting is optional: without SYNC_API_BASE_URL the cloud sync is
simply disabled, and without LLM_API_KEY the coach reports it is not configured.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Sync server (SQLite-backed)
    DATABASE_PATH: str = "data/life_tracker.db"
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 4000
    CORS_ORIGINS: list[str] = ["*"]
    MAX_BODY_BYTES: int = 1024 * 1024

    # Sync client — empty base URL means "API is not configured"
    SYNC_API_BASE_URL: str = ""
    SYNC_TIMEOUT_SECONDS: float = 10.0

    # Local state (the browser's localStorage equivalent)
    LOCAL_STORE_PATH: str = "data/local_store.json"

    # LLM — provider-agnostic (gemini, anthropic, openai, cohere)
    LLM_PROVIDER: str = "gemini"
    LLM_MODEL: str = ""          # empty → smart default per provider
    LLM_API_KEY: str = ""

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, list):
            return v
        if isinstance(v, str) and v.strip():
            return [o.strip() for o in v.split(",") if o.strip()]
        return ["*"]

    @field_validator("SYNC_API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("SERVER_PORT", "MAX_BODY_BYTES", mode="before")
    @classmethod
    def parse_int(cls, v: str | int) -> int:
        return int(v)

    @field_validator("SYNC_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def parse_timeout(cls, v: str | float) -> float:
        value = float(v)
        if value <= 0:
            raise ValueError("SYNC_TIMEOUT_SECONDS must be positive")
        return value


def _load_settings() -> Settings:
    """Load settings from environment."""
    llm_api_key = os.getenv("LLM_API_KEY", "")
    if llm_api_key.startswith("your-"):
        llm_api_key = ""

    return Settings(
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/life_tracker.db"),
        SERVER_HOST=os.getenv("SERVER_HOST", "0.0.0.0"),
        SERVER_PORT=os.getenv("SERVER_PORT", os.getenv("PORT", "4000")),
        CORS_ORIGINS=os.getenv("CORS_ORIGINS", "*"),
        MAX_BODY_BYTES=os.getenv("MAX_BODY_BYTES", str(1024 * 1024)),
        SYNC_API_BASE_URL=os.getenv("SYNC_API_BASE_URL", ""),
        SYNC_TIMEOUT_SECONDS=os.getenv("SYNC_TIMEOUT_SECONDS", "10"),
        LOCAL_STORE_PATH=os.getenv("LOCAL_STORE_PATH", "data/local_store.json"),
        LLM_PROVIDER=os.getenv("LLM_PROVIDER", "gemini"),
        LLM_MODEL=os.getenv("LLM_MODEL", ""),
        LLM_API_KEY=llm_api_key,
    )


# Singleton — imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
