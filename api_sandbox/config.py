# api_sandbox/config.py
"""
Centralized, env-driven configuration for the API sandbox.

Override via environment variables prefixed with SANDBOX_ or a .env file at
repo root (e.g. SANDBOX_SIMULATED_DELAY_MS=0 for instant mock responses).
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROXY_BASE_URL = "https://api.allorigins.win/raw"

# Common query parameter names APIs expect a key under
DEFAULT_CREDENTIAL_ALIASES = ["appid", "api_key", "apikey", "key", "access_key"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SandboxSettings(BaseSettings):
    """Runtime knobs for the execution engine and the sandbox session."""

    simulated_delay_ms: int = Field(default=600, ge=0)  # pending-state delay for mock paths
    request_timeout_s: float = Field(default=30.0, gt=0)
    proxy_base_url: str = DEFAULT_PROXY_BASE_URL
    credential_aliases: List[str] = Field(default_factory=lambda: list(DEFAULT_CREDENTIAL_ALIASES))
    verify_ssl: bool = True
    follow_redirects: bool = True
    history_capacity: Optional[int] = Field(default=None, ge=1)  # None = unbounded
    log_level: str = "INFO"
    catalog_path: Optional[str] = None

    # Pydantic v2 config: ignore unknown envs, load .env in UTF-8
    model_config = SettingsConfigDict(
        env_prefix="SANDBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("credential_aliases")
    @classmethod
    def _aliases_not_empty(cls, v: List[str]) -> List[str]:
        aliases = [a.strip() for a in v if a and a.strip()]
        if not aliases:
            raise ValueError("credential_aliases must name at least one query parameter")
        return aliases

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper()


@lru_cache(maxsize=1)
def get_settings() -> SandboxSettings:
    """Process-wide settings, read once from the environment."""
    return SandboxSettings()


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a console handler to the root logger (scripts and demos only)."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(level or get_settings().log_level)
    root.handlers = [handler]
