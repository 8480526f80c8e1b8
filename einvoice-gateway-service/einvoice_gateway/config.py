"""Application configuration."""

from __future__ import annotations

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .rulesets import DEFAULT_RULESET


def _default_scratch_dir() -> Path:
    return Path(tempfile.gettempdir()) / "einvoice-reports"


class Settings(BaseSettings):
    """Gateway settings loaded from `EINVOICE_*` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EINVOICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote validator
    validator_url: str = "https://services.ebusiness-cloud.com/ess-schematron/v1/api/validate"
    auth_url: str = ""
    client_id: str = ""
    client_secret: str = ""
    auth_scope: str = "eat/read"
    accept_language: str = "en"
    request_timeout: float = 60.0

    # Reports
    default_ruleset: str = DEFAULT_RULESET
    scratch_dir: Path = Field(default_factory=_default_scratch_dir)

    # Server
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
