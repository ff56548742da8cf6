# api_sandbox/session.py
"""
Sandbox session: the orchestration layer between a UI and the engine.

Owns the current RunOptions, the loading flag, the last result and the run
history for the selected API. It is the single writer of that state; the
engine never sees it, and the UI only reads it.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Union

from api_sandbox.config import SandboxSettings, get_settings
from api_sandbox.engine import ExecutionEngine
from api_sandbox.history import HistoryEntry, HistoryLog
from api_sandbox.sandbox_types import (
    ApiDescriptor,
    ExecutionResult,
    NoApiSelectedError,
    ResultSource,
    RunOptions,
    SessionBusyError,
)

logger = logging.getLogger(__name__)


# Hints shown next to a failed result, keyed by status code; 0 = no response
ERROR_SUGGESTIONS = {
    0: "Check your internet connection or CORS settings. Many public APIs block direct browser requests.",
    401: "The API Key provided is likely invalid or missing.",
    403: "Access Forbidden. You may be rate limited or restricted.",
    404: "The endpoint URL is incorrect or the resource no longer exists.",
}
DEFAULT_ERROR_SUGGESTION = "Check the response body below for specific error messages."


def default_mock_body(descriptor: ApiDescriptor) -> str:
    """Pretty-printed mock response used to seed the editable mock body."""
    if descriptor.mock_response is None:
        return ""
    return json.dumps(descriptor.mock_response, indent=2, ensure_ascii=False)


def error_suggestion(status_code: int) -> str:
    """What to try next after a failed run with this status code."""
    return ERROR_SUGGESTIONS.get(status_code, DEFAULT_ERROR_SUGGESTION)


class SandboxSession:
    """
    Per-user sandbox state for one selected API.

    Usage:
        session = SandboxSession()
        session.select_api(default_catalog()["cat-facts"])
        result = await session.run()
        options = session.restore(session.history.latest)
    """

    def __init__(
        self,
        engine: Optional[ExecutionEngine] = None,
        settings: Optional[SandboxSettings] = None,
        history: Optional[HistoryLog] = None,
    ):
        self.settings = settings or (engine.settings if engine else get_settings())
        self.engine = engine or ExecutionEngine(self.settings)
        self.history = history if history is not None else HistoryLog(self.settings.history_capacity)

        self.api: Optional[ApiDescriptor] = None
        self.options = RunOptions()
        self.loading = False
        self.last_result: Optional[ExecutionResult] = None

    # ==================== Selection ====================

    def select_api(self, descriptor: ApiDescriptor) -> None:
        """Switch to another API; options, result and history start over."""
        self.api = descriptor
        self.options = RunOptions(editable_mock_body=default_mock_body(descriptor))
        self.last_result = None
        self.history.clear()
        logger.debug("Selected API %s", descriptor.id)

    # ==================== Running ====================

    async def run(self, proxy_override: Optional[bool] = None) -> ExecutionResult:
        """Execute the current options and record the run in history.

        Args:
            proxy_override: Use this proxy flag for the run instead of the
                one in the current options (the options are not changed)

        Raises:
            NoApiSelectedError: if select_api() was never called
            SessionBusyError: if a run is already in flight
        """
        self._check_ready()

        api = self.api
        run_options = self.options.copy()
        if proxy_override is not None:
            run_options = run_options.with_proxy(proxy_override)

        self.loading = True
        self.last_result = None
        try:
            result = await self.engine.execute(api, run_options)
        finally:
            self.loading = False

        self.last_result = result
        self.history.record(HistoryEntry.from_result(api.id, result, run_options))
        return result

    async def fix_cors(self) -> ExecutionResult:
        """Turn the CORS relay on and run again.

        Raises the same errors as run(), before the options are touched.
        """
        self._check_ready()
        self.options.proxy_enabled = True
        return await self.run(proxy_override=True)

    @property
    def suggest_proxy(self) -> bool:
        """True when the last live run got no response, so the relay may help."""
        result = self.last_result
        return result is not None and result.is_transport_error and result.source is ResultSource.LIVE

    @property
    def suggestion(self) -> Optional[str]:
        """Troubleshooting hint for the last result; None unless it failed."""
        result = self.last_result
        if result is None or result.success:
            return None
        return error_suggestion(result.status_code)

    def _check_ready(self) -> None:
        if self.api is None:
            raise NoApiSelectedError("Select an API before running")
        if self.loading:
            raise SessionBusyError(f"A run for '{self.api.id}' is already in progress")

    # ==================== History ====================

    def restore(self, entry: Union[HistoryEntry, int]) -> RunOptions:
        """Adopt a past run's options; the run itself is not repeated."""
        if not isinstance(entry, HistoryEntry):
            entry = self.history.get(entry)
        self.options = self.history.restore(entry)
        self.last_result = None
        return self.options

    def clear_history(self) -> None:
        self.history.clear()

    def state(self) -> Dict[str, Any]:
        """Render-ready snapshot of the session."""
        return {
            "api_id": self.api.id if self.api else None,
            "options": self.options.to_dict(),
            "loading": self.loading,
            "result": self.last_result.to_dict() if self.last_result else None,
            "suggest_proxy": self.suggest_proxy,
            "suggestion": self.suggestion,
            "history": self.history.to_list(),
        }
