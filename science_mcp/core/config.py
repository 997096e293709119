"""
Runtime settings and logging setup for science-mcp
"""
from __future__ import annotations

import logging
import sys
import tempfile
from pathlib import Path
from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PAYWALLED_DOMAINS: Tuple[str, ...] = (
    "scholar.google.com",
    "sciencedirect.com",
    "ieee.org",
    "acm.org",
    "springer.com",
    "wiley.com",
    "tandfonline.com",
    "sagepub.com",
    "taylorfrancis.com",
    "emerald.com",
    "jstor.org",
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _default_download_dir() -> Path:
    return Path(tempfile.gettempdir()) / "science_mcp_downloads"


class Settings(BaseSettings):
    """Settings loaded from SCIENCE_MCP_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCIENCE_MCP_",
        env_file=".env",
        extra="ignore",
    )

    # Storage
    download_dir: Path = Field(default_factory=_default_download_dir)

    # HTTP
    request_timeout: float = 30.0
    search_timeout: float = 15.0
    user_agent: str = "Mozilla/5.0 (compatible; ScienceMCP/1.0)"
    arxiv_api_url: str = "http://export.arxiv.org/api/query"
    semantic_scholar_url: str = "https://api.semanticscholar.org/graph/v1"

    # Paywall recovery
    paywalled_domains: Tuple[str, ...] = DEFAULT_PAYWALLED_DOMAINS
    fallback_attempts: int = 1

    # Text extraction and response sizing
    line_break_threshold: float = 5.0
    max_response_tokens: int = 15000
    chunk_start_cap: int = 2
    fallback_max_chars: int = 80000

    log_level: str = "INFO"


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout carries the stdio protocol stream."""
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(level.upper())

    # pypdf reports every recoverable structure problem as a warning.
    logging.getLogger("pypdf").setLevel(logging.ERROR)
