"""API Sandbox - execution engine and run history for exploring third-party REST APIs."""

from api_sandbox.catalog import Catalog, default_catalog, load_catalog, parse_catalog
from api_sandbox.config import SandboxSettings, configure_logging, get_settings
from api_sandbox.engine import ExecutionEngine, ExecutionPath, select_path
from api_sandbox.history import HistoryEntry, HistoryLog
from api_sandbox.normalizer import normalize_body
from api_sandbox.sandbox_types import (
    ApiDescriptor,
    AuthType,
    CatalogError,
    ExecutionResult,
    HistoryEntryNotFoundError,
    NoApiSelectedError,
    QuizQuestion,
    ResultSource,
    RunOptions,
    SandboxError,
    SessionBusyError,
    UnknownApiError,
)
from api_sandbox.session import SandboxSession, error_suggestion

__version__ = "1.0.0"

__all__ = [
    # Catalog
    "ApiDescriptor",
    "AuthType",
    "Catalog",
    "QuizQuestion",
    "default_catalog",
    "load_catalog",
    "parse_catalog",
    # Execution
    "ExecutionEngine",
    "ExecutionPath",
    "ExecutionResult",
    "ResultSource",
    "RunOptions",
    "normalize_body",
    "select_path",
    # History and session
    "HistoryEntry",
    "HistoryLog",
    "SandboxSession",
    "error_suggestion",
    # Configuration
    "SandboxSettings",
    "configure_logging",
    "get_settings",
    # Errors
    "SandboxError",
    "CatalogError",
    "UnknownApiError",
    "HistoryEntryNotFoundError",
    "SessionBusyError",
    "NoApiSelectedError",
]
