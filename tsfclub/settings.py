"""
tsfclub.settings
================

Configuration settings for the club engine and its HTTP layer.

Values come from environment variables prefixed with ``TSF_`` (or a
``.env`` file in the working directory) and fall back to the defaults
below.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent
FIXTURES_DIR = Path(__file__).resolve().parent / "data"


# ---------------------------------------------------------------------------
# Pydantic settings model
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Application settings, loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TSF_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    db_url: str = Field(f"sqlite:///{BASE_DIR / 'tsfclub.db'}", description="SQLAlchemy URL")
    db_echo: bool = Field(False, description="Echo SQL statements")

    # API
    api_host: str = Field("127.0.0.1", description="Bind address for `serve`")
    api_port: int = Field(8000, description="Bind port for `serve`")
    log_level: str = Field("INFO", description="Root logging level")

    # Engine
    fixtures_dir: Path = Field(FIXTURES_DIR, description="Directory with seed JSON files")
    search_limit: int = Field(10, description="Colleges returned for an empty search")
    bcrypt_rounds: int = Field(12, ge=4, le=31, description="bcrypt cost factor")
    points_scope: Literal["chapter", "global"] = Field(
        "chapter",
        description="Whether certificate totals count one chapter or all chapters",
    )
    certificate_prefix: str = Field("TSF", description="Certificate number prefix")


settings = Settings()
