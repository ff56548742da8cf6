# api_sandbox/sandbox_types.py
"""
Shared types, enums, and exceptions for the API sandbox.

ApiDescriptor is the catalog boundary (validated with pydantic, frozen);
RunOptions and ExecutionResult are plain dataclasses passed between the
session, the engine and the history log.
"""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AuthType(Enum):
    """How an API authenticates callers."""
    NONE = "None"
    API_KEY = "API Key"
    OAUTH = "OAuth"

    @classmethod
    def _missing_(cls, value: object) -> Optional["AuthType"]:
        # Accept "apikey", "api_key", "oauth", ... as written by hand-made catalogs
        if isinstance(value, str):
            wanted = value.replace(" ", "").replace("_", "").lower()
            for member in cls:
                if member.value.replace(" ", "").lower() == wanted:
                    return member
        return None


class ResultSource(Enum):
    """Provenance of an execution result."""
    LIVE = "Live"
    MOCK = "Mock"
    PROXY = "Proxy"
    CUSTOM_MOCK = "Custom Mock"


# ==================== Catalog Models ====================

class QuizQuestion(BaseModel):
    """Multiple-choice question attached to a descriptor."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str
    options: Tuple[str, ...]
    correct_answer: int = Field(alias="correctAnswer", ge=0)

    @model_validator(mode="after")
    def _answer_in_range(self) -> "QuizQuestion":
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} out of range for {len(self.options)} options"
            )
        return self


class ApiDescriptor(BaseModel):
    """Immutable description of one third-party API.

    Field aliases follow the camelCase keys of the catalog files
    (``endpoint``, ``authRequired``, ``mockResponse``, ...); snake_case names
    are accepted as well.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    endpoint_template: str = Field(alias="endpoint", min_length=1)
    auth_required: bool = Field(default=False, alias="authRequired")
    auth_type: AuthType = Field(default=AuthType.NONE, alias="authType")
    mock_response: Any = Field(default=None, alias="mockResponse")

    # explanatory metadata, rendered by the UI and never read by the engine
    name: str = ""
    category: str = ""
    description: str = ""
    docs_url: Optional[str] = Field(default=None, alias="docsUrl")
    code_snippet: str = Field(default="", alias="codeSnippet")
    json_explanation: Dict[str, str] = Field(default_factory=dict, alias="jsonExplanation")
    security_checklist: Tuple[str, ...] = Field(default=(), alias="securityChecklist")
    exercise: str = ""
    quiz: Tuple[QuizQuestion, ...] = ()

    @model_validator(mode="after")
    def _gated_api_has_mock(self) -> "ApiDescriptor":
        if self.auth_required and self.mock_response is None:
            raise ValueError(f"API '{self.id}' requires auth but defines no mockResponse")
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.id


# ==================== Run Models ====================

@dataclass
class RunOptions:
    """User-chosen configuration for one invocation."""
    mock_mode_enabled: bool = False
    credential: Optional[str] = None
    editable_mock_body: str = ""
    proxy_enabled: bool = False

    @property
    def has_credential(self) -> bool:
        # An empty key field means "no key"
        return bool(self.credential)

    def copy(self) -> RunOptions:
        """Structural copy; never shares state with self."""
        return copy.deepcopy(self)

    def with_proxy(self, enabled: bool) -> RunOptions:
        return replace(self, proxy_enabled=enabled)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ExecutionResult:
    """Normalized outcome of one invocation."""
    success: bool
    payload: Any
    status_code: int  # 0 = no HTTP response received
    duration_ms: int
    source: ResultSource

    @property
    def is_transport_error(self) -> bool:
        return self.status_code == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "payload": self.payload,
            "status_code": self.status_code,
            "duration_ms": self.duration_ms,
            "source": self.source.value,
        }


# ==================== Exceptions ====================

class SandboxError(Exception):
    """Base exception for sandbox errors."""
    pass


class CatalogError(SandboxError):
    """Raised when catalog data cannot be loaded or validated."""
    pass


class UnknownApiError(SandboxError, KeyError):
    """Raised when a descriptor id is not in the catalog."""

    def __init__(self, api_id: str, known: List[str]):
        self.api_id = api_id
        self.known = known
        super().__init__(f"Unknown API '{api_id}' (known: {', '.join(sorted(known)) or 'none'})")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class HistoryEntryNotFoundError(SandboxError):
    """Raised when a history entry id is not in the log."""

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"History entry {entry_id} not found")


class SessionBusyError(SandboxError):
    """Raised when a run is requested while another run is in flight."""
    pass


class NoApiSelectedError(SandboxError):
    """Raised when the session is asked to run before an API is selected."""
    pass
