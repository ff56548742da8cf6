# api_sandbox/engine.py
"""
API Execution Engine

Turns an ApiDescriptor plus RunOptions into a normalized ExecutionResult.
Exactly one path runs per invocation, chosen in this fixed order:

1. Custom mock  - options.mock_mode_enabled: the editable body is parsed
                  as JSON, no network.
2. Mock         - descriptor.auth_required without a credential: the
                  descriptor's mock response is returned, no network.
3. Live / Proxy - GET against the endpoint (credential injected under
                  every alias), optionally wrapped by the CORS relay.

Every failure is reported as a result with success=False; nothing is retried
and nothing is raised out of execute() under normal operation.
Concurrent calls are independent: each one owns its result and, unless a
shared client was injected, its own HTTP client.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import time
from enum import Enum
from typing import Optional

import httpx

from api_sandbox.config import SandboxSettings, get_settings
from api_sandbox.normalizer import normalize_body, strict_loads
from api_sandbox.sandbox_types import (
    ApiDescriptor,
    ExecutionResult,
    ResultSource,
    RunOptions,
)
from api_sandbox.urls import build_request_url, redact_url

logger = logging.getLogger(__name__)

INVALID_MOCK_MESSAGE = "Invalid JSON format. Please correct the JSON syntax."

# A refused connection looks the same whether CORS, DNS or the network is to blame
NETWORK_ERROR_MESSAGE = (
    "Network Error: The request was blocked before any response arrived. "
    "This is often due to CORS (Cross-Origin Resource Sharing) restrictions "
    "on the API or a loss of internet connection."
)

REQUEST_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class ExecutionPath(Enum):
    """Which branch an invocation takes."""
    CUSTOM_MOCK = "custom_mock"
    MOCK = "mock"
    LIVE = "live"
    PROXY = "proxy"

    @property
    def source(self) -> ResultSource:
        return _PATH_SOURCES[self]

    @property
    def uses_network(self) -> bool:
        return self in (ExecutionPath.LIVE, ExecutionPath.PROXY)


_PATH_SOURCES = {
    ExecutionPath.CUSTOM_MOCK: ResultSource.CUSTOM_MOCK,
    ExecutionPath.MOCK: ResultSource.MOCK,
    ExecutionPath.LIVE: ResultSource.LIVE,
    ExecutionPath.PROXY: ResultSource.PROXY,
}


def select_path(descriptor: ApiDescriptor, options: RunOptions) -> ExecutionPath:
    """Deterministic path selection from (auth_required, credential, mock, proxy)."""
    if options.mock_mode_enabled:
        return ExecutionPath.CUSTOM_MOCK
    if descriptor.auth_required and not options.has_credential:
        return ExecutionPath.MOCK
    return ExecutionPath.PROXY if options.proxy_enabled else ExecutionPath.LIVE


def describe_transport_error(exc: Exception, timeout_s: float) -> str:
    """Human-readable message for a call that produced no HTTP response."""
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
        return f"Network Error: No response within {timeout_s:g}s; the request was aborted."
    if isinstance(exc, httpx.NetworkError):
        return NETWORK_ERROR_MESSAGE
    return str(exc) or "Network Error"


class ExecutionEngine:
    """
    Executes one API invocation per call.

    Args:
        settings: Engine settings (defaults to the env-driven settings)
        client: Shared httpx client owned by the caller; never closed here
        transport: httpx transport for per-call clients (tests use MockTransport)
    """

    def __init__(
        self,
        settings: Optional[SandboxSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self._client = client
        self._transport = transport

    # ==================== Public API ====================

    async def execute(self, descriptor: ApiDescriptor, options: RunOptions) -> ExecutionResult:
        """Run the descriptor with the given options and return a fresh result."""
        started = time.perf_counter()
        path = select_path(descriptor, options)
        logger.debug("▶️ %s: %s path", descriptor.id, path.value)

        if path is ExecutionPath.CUSTOM_MOCK:
            return await self._run_custom_mock(options, started)
        if path is ExecutionPath.MOCK:
            return await self._run_mock(descriptor, started)
        return await self._run_network(descriptor, options, path, started)

    def execute_sync(self, descriptor: ApiDescriptor, options: RunOptions) -> ExecutionResult:
        """Synchronous wrapper for execute()"""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            raise RuntimeError("execute_sync() called inside running loop; use await execute()")

        return asyncio.run(self.execute(descriptor, options))

    # ==================== Mock Paths ====================

    async def _run_custom_mock(self, options: RunOptions, started: float) -> ExecutionResult:
        await self._simulate_latency()
        try:
            payload = strict_loads(options.editable_mock_body)
        except ValueError as e:
            logger.debug("Custom mock body rejected: %s", e)
            return self._result(False, {"error": INVALID_MOCK_MESSAGE}, 400, ResultSource.CUSTOM_MOCK, started)
        return self._result(True, payload, 200, ResultSource.CUSTOM_MOCK, started)

    async def _run_mock(self, descriptor: ApiDescriptor, started: float) -> ExecutionResult:
        # A key-gated API called without a key would fail; answer with the mock instead
        await self._simulate_latency()
        payload = copy.deepcopy(descriptor.mock_response)
        return self._result(True, payload, 200, ResultSource.MOCK, started)

    async def _simulate_latency(self) -> None:
        delay_ms = self.settings.simulated_delay_ms
        if delay_ms > 0:
            await asyncio.sleep(delay_ms / 1000)

    # ==================== Network Path ====================

    async def _run_network(
        self,
        descriptor: ApiDescriptor,
        options: RunOptions,
        path: ExecutionPath,
        started: float,
    ) -> ExecutionResult:
        url = build_request_url(
            descriptor.endpoint_template,
            options.credential,
            self.settings.credential_aliases,
            self.settings.proxy_base_url if path is ExecutionPath.PROXY else None,
        )
        safe_url = redact_url(url, self.settings.credential_aliases)
        source = path.source

        timeout_s = self.settings.request_timeout_s
        try:
            # httpx timeouts are per read; a slow-drip body needs an overall deadline
            response = await asyncio.wait_for(self._fetch(url), timeout=timeout_s)
        except asyncio.CancelledError:
            raise
        except (httpx.TransportError, asyncio.TimeoutError) as e:
            message = describe_transport_error(e, timeout_s)
            logger.debug("🔌 %s: GET %s → no response (%s)", descriptor.id, safe_url, type(e).__name__)
            return self._result(False, {"error": message}, 0, source, started)
        except Exception as e:
            # InvalidURL, malformed relay config, ...
            logger.debug("❌ %s: GET %s failed - %s", descriptor.id, safe_url, type(e).__name__)
            return self._result(False, {"error": str(e) or "Network Error"}, 0, source, started)

        payload = normalize_body(
            response.headers.get("content-type"),
            response.text,
            response.reason_phrase,
        )
        success = 200 <= response.status_code <= 299
        result = self._result(success, payload, response.status_code, source, started)
        # failures are reported in the result; keep them out of INFO
        logger.log(
            logging.INFO if success else logging.DEBUG,
            "%s %s: GET %s → %s (%sms)",
            "✅" if success else "⚠️",
            descriptor.id,
            safe_url,
            response.status_code,
            result.duration_ms,
        )
        return result

    async def _fetch(self, url: str) -> httpx.Response:
        timeout = httpx.Timeout(self.settings.request_timeout_s)

        if self._client is not None:
            return await self._client.get(url, headers=REQUEST_HEADERS, timeout=timeout)

        async with httpx.AsyncClient(
            timeout=timeout,
            verify=self.settings.verify_ssl,
            follow_redirects=self.settings.follow_redirects,
            transport=self._transport,
        ) as client:
            return await client.get(url, headers=REQUEST_HEADERS)

    # ==================== Internals ====================

    @staticmethod
    def _result(
        success: bool,
        payload,
        status_code: int,
        source: ResultSource,
        started: float,
    ) -> ExecutionResult:
        return ExecutionResult(
            success=success,
            payload=payload,
            status_code=status_code,
            duration_ms=int(round((time.perf_counter() - started) * 1000)),
            source=source,
        )
