"""
Configuration settings for the contract analysis pipeline.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    return float(value) if value else None


@dataclass
class Config:
    """Configuration settings for the system."""

    # Version
    VERSION: str = "1.0.0"

    # LLM provider (OpenRouter, OpenAI-compatible chat completions)
    OPENROUTER_API_KEY: Optional[str] = field(default_factory=lambda: os.getenv("OPENROUTER_API_KEY"))
    OPENROUTER_BASE_URL: str = field(
        default_factory=lambda: os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    )
    OPENROUTER_MODEL: str = field(
        default_factory=lambda: os.getenv("OPENROUTER_MODEL", "xiaomi/mimo-v2-flash:free")
    )
    PROVIDER_NAME: str = "openrouter"
    APP_URL: str = field(default_factory=lambda: os.getenv("APP_URL", "http://localhost:3000"))
    APP_NAME: str = "SignLoop"

    # None means the model call waits for the provider indefinitely
    LLM_TIMEOUT_SECONDS: Optional[float] = field(default_factory=lambda: _optional_float("LLM_TIMEOUT_SECONDS"))

    # Prompt settings
    MAX_PROMPT_TEXT_CHARS: int = 15000

    # Text extraction settings
    MIN_TEXT_DENSITY: int = 50  # chars per page below which a PDF looks scanned
    SCANNED_PDF_MAX_CHARS: int = 500
    OCR_LANGUAGE: str = "eng"

    ALLOWED_MIME_TYPES: List[str] = field(default_factory=lambda: [
        "application/pdf",
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/tiff",
        "text/plain",
    ])

    # API configuration
    API_TITLE: str = "SignLoop Contract Analysis API"
    API_DESCRIPTION: str = "Text extraction and LLM risk analysis for uploaded contracts"
    API_VERSION: str = "v1.0"
    API_HOST: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    API_PORT: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))
