"""
Centralized settings module for LexBaux.
Single source of truth for all configuration values.
"""

import os
from pathlib import Path
from typing import List, Optional


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


class LexBauxSettings:
    """Centralized configuration for the LexBaux analysis service."""

    VERSION: str = "0.1.0"

    # Text extraction gate: below this many characters (after trim) the PDF is
    # treated as a scan without OCR.
    MIN_TEXT_CHARS: int = int(os.getenv("LEXBAUX_MIN_TEXT_CHARS", "40"))
    MAX_UPLOAD_BYTES: int = int(os.getenv("LEXBAUX_MAX_UPLOAD_BYTES", str(20 * 1024 * 1024)))

    # General-info extraction strategy ("segments" or "structured")
    GENERAL_INFO_STRATEGY: str = os.getenv("LEXBAUX_GENERAL_INFO_STRATEGY", "segments")
    CONFIG_PATH: str = os.getenv("LEXBAUX_CONFIG", "lexbaux.yaml")

    # API Configuration
    CORS_ORIGINS: List[str] = _split_csv(
        os.getenv("LEXBAUX_CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
    )
    HOST: str = os.getenv("LEXBAUX_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("LEXBAUX_PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LEXBAUX_LOG_LEVEL", "INFO")

    # Local runner
    DATA_DIR: Path = Path(os.getenv("LEXBAUX_DATA_DIR", "data"))
    OUTPUT_DIR: Path = Path(os.getenv("LEXBAUX_OUTPUT_DIR", "outputs"))

    @classmethod
    def get_strategy(cls, override: Optional[str] = None) -> str:
        """
        Get the general-info strategy name with optional per-request override.

        Args:
            override: Per-request override. If None or blank, uses default setting.

        Returns:
            str: Strategy name, lower-cased
        """
        if override and override.strip():
            return override.strip().lower()
        return cls.GENERAL_INFO_STRATEGY.strip().lower()

    @classmethod
    def is_usable_length(cls, text: Optional[str]) -> bool:
        """
        Whether extracted text is long enough to be analysed.

        Args:
            text: Extracted document text (may be None)

        Returns:
            bool: True when the trimmed text reaches MIN_TEXT_CHARS
        """
        return len((text or "").strip()) >= cls.MIN_TEXT_CHARS


# Create singleton instance
settings = LexBauxSettings()
