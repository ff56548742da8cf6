# api_sandbox/normalizer.py
"""
Response normalization: turns a raw HTTP body into a uniform payload.

The classification is best-effort and pure. A JSON-looking body that fails to
parse degrades to a message-wrapped payload instead of failing the call.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant {name}")


def strict_loads(text: str) -> Any:
    """json.loads that rejects NaN, Infinity and -Infinity like a standard JSON parser."""
    return json.loads(text, parse_constant=_reject_constant)


def advertises_json(content_type: Optional[str]) -> bool:
    """True for application/json and vendor types like application/problem+json."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def looks_like_json(body: str) -> bool:
    stripped = body.lstrip()
    return stripped.startswith("{") or stripped.startswith("[")


def normalize_body(content_type: Optional[str], body: str, status_text: str = "") -> Any:
    """Classify a response body as JSON or text and wrap it uniformly.

    Args:
        content_type: Value of the content-type header, if any
        body: Decoded response body, read exactly once by the caller
        status_text: HTTP reason phrase, used when the body is empty

    Returns:
        The parsed JSON value, or ``{"message": ...}`` for text, unparseable
        and empty bodies.
    """
    if not body.strip():
        return _message(status_text)

    if advertises_json(content_type) or looks_like_json(body):
        try:
            return strict_loads(body)
        except ValueError:
            return _message(body)

    # HTML error pages, plain text, ...
    return _message(body)


def _message(text: str) -> Dict[str, str]:
    return {"message": text}
