"""Tests for env-driven settings."""

import logging

import pytest
from pydantic import ValidationError

from api_sandbox.config import (
    DEFAULT_CREDENTIAL_ALIASES,
    DEFAULT_PROXY_BASE_URL,
    SandboxSettings,
    configure_logging,
)


def test_defaults(monkeypatch):
    for name in ("SANDBOX_SIMULATED_DELAY_MS", "SANDBOX_PROXY_BASE_URL", "SANDBOX_CREDENTIAL_ALIASES"):
        monkeypatch.delenv(name, raising=False)

    settings = SandboxSettings(_env_file=None)

    assert settings.simulated_delay_ms == 600
    assert settings.proxy_base_url == DEFAULT_PROXY_BASE_URL
    assert settings.credential_aliases == DEFAULT_CREDENTIAL_ALIASES
    assert settings.history_capacity is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SANDBOX_SIMULATED_DELAY_MS", "0")
    monkeypatch.setenv("SANDBOX_REQUEST_TIMEOUT_S", "2.5")
    monkeypatch.setenv("SANDBOX_CREDENTIAL_ALIASES", '["token"]')
    monkeypatch.setenv("SANDBOX_HISTORY_CAPACITY", "10")
    monkeypatch.setenv("SANDBOX_LOG_LEVEL", "debug")

    settings = SandboxSettings(_env_file=None)

    assert settings.simulated_delay_ms == 0
    assert settings.request_timeout_s == 2.5
    assert settings.credential_aliases == ["token"]
    assert settings.history_capacity == 10
    assert settings.log_level == "DEBUG"


def test_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("SANDBOX_PROXY_BASE_URL", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("SANDBOX_PROXY_BASE_URL=https://relay.test/raw\nUNRELATED=1\n", encoding="utf-8")

    settings = SandboxSettings(_env_file=env_file)

    assert settings.proxy_base_url == "https://relay.test/raw"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"credential_aliases": []},
        {"credential_aliases": ["  "]},
        {"simulated_delay_ms": -1},
        {"request_timeout_s": 0},
        {"history_capacity": 0},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        SandboxSettings(_env_file=None, **kwargs)


def test_configure_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging("WARNING")
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
