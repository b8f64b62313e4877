"""
Centralized configuration — loads from .env with sensible defaults.
"""

from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")


def _csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    """All project settings in one place."""

    # Paths
    PROJECT_ROOT: Path = _PROJECT_ROOT
    BROWSER_DATA_DIR: Path = _PROJECT_ROOT / os.getenv("BROWSER_DATA_DIR", "browser_data")
    LOG_DIR: Path = _PROJECT_ROOT / os.getenv("LOG_DIR", "logs")

    # Browser
    HEADLESS: bool = os.getenv("HEADLESS", "true").lower() == "true"
    SLOW_MO: int = int(os.getenv("SLOW_MO", "0"))
    START_URL: str = os.getenv("START_URL", "")
    NAVIGATION_TIMEOUT: int = int(os.getenv("NAVIGATION_TIMEOUT", "30000"))  # ms

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG")
    VERBOSE: bool = os.getenv("VERBOSE", "true").lower() == "true"

    # API
    API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_TOKEN: str = os.getenv("API_TOKEN", "")  # Bearer token for API auth (empty = no auth)
    CORS_ORIGINS: list[str] = _csv(os.getenv("CORS_ORIGINS", "http://localhost,http://127.0.0.1"))

    # Listing
    DEFAULT_RESOURCE_TYPES: list[str] = _csv(os.getenv("DEFAULT_RESOURCE_TYPES", "xhr,fetch,document"))

    # Rendering budgets
    REQUEST_BODY_SNIPPET_BYTES: int = int(os.getenv("REQUEST_BODY_SNIPPET_BYTES", "300"))
    JSON_MAX_ARRAY_LENGTH: int = int(os.getenv("JSON_MAX_ARRAY_LENGTH", "5"))
    JSON_MAX_STRING_LENGTH: int = int(os.getenv("JSON_MAX_STRING_LENGTH", "300"))
    JSON_MAX_BYTES: int = int(os.getenv("JSON_MAX_BYTES", "8192"))
    TEXT_MAX_BYTES: int = int(os.getenv("TEXT_MAX_BYTES", "2048"))

    @classmethod
    def ensure_dirs(cls) -> None:
        """Create required directories if they don't exist."""
        cls.BROWSER_DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
