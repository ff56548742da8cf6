"""Shared fixtures: zero-delay settings and engines wired to httpx.MockTransport."""

from typing import Callable, List, Optional

import httpx
import pytest

from api_sandbox.config import SandboxSettings
from api_sandbox.engine import ExecutionEngine
from api_sandbox.sandbox_types import ApiDescriptor

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> SandboxSettings:
    return SandboxSettings(_env_file=None, simulated_delay_ms=0, request_timeout_s=5.0)


@pytest.fixture
def requests_seen() -> List[httpx.Request]:
    """Every request that reached the mock transport."""
    return []


@pytest.fixture
def make_engine(settings, requests_seen):
    """Build an engine whose network calls go to ``handler``."""

    def factory(handler: Optional[Handler] = None) -> ExecutionEngine:
        def recording(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            if handler is None:
                return httpx.Response(200, json={"ok": True})
            return handler(request)

        return ExecutionEngine(settings, transport=httpx.MockTransport(recording))

    return factory


@pytest.fixture
def public_api() -> ApiDescriptor:
    return ApiDescriptor(
        id="cat-facts",
        endpoint_template="https://api.example.com/fact",
        auth_required=False,
    )


@pytest.fixture
def gated_api() -> ApiDescriptor:
    return ApiDescriptor(
        id="weather",
        endpoint_template="https://api.example.com/weather?q=London",
        auth_required=True,
        auth_type="API Key",
        mock_response={"main": {"temp": 280.32}, "name": "London"},
    )
