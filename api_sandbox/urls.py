# api_sandbox/urls.py
"""
Request URL construction: credential injection, CORS-relay wrapping and
redaction of credential parameters for log output.
"""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import quote, unquote, unquote_plus, urlencode

REDACTED = "[REDACTED]"

# Characters encodeURIComponent leaves alone on top of quote()'s "_.-~"
_URI_COMPONENT_SAFE = "!*'()"


def _separator(url: str) -> str:
    if url.endswith(("?", "&")):
        return ""
    return "&" if "?" in url else "?"


def inject_credential(url: str, credential: Optional[str], aliases: Iterable[str]) -> str:
    """Append the credential under every alias as separate query parameters.

    The descriptor does not say which parameter name the API expects, so all
    common names are supplied at once. Without a credential the URL is
    returned unchanged.
    """
    if not credential:
        return url

    query = urlencode([(alias, credential) for alias in aliases])
    if not query:
        return url
    return f"{url}{_separator(url)}{query}"


def wrap_with_proxy(url: str, proxy_base_url: str) -> str:
    """Route a URL through the CORS relay as its percent-encoded ``url`` argument."""
    encoded = quote(url, safe=_URI_COMPONENT_SAFE)
    return f"{proxy_base_url}{_separator(proxy_base_url)}url={encoded}"


def build_request_url(
    endpoint_template: str,
    credential: Optional[str],
    aliases: Iterable[str],
    proxy_base_url: Optional[str] = None,
) -> str:
    """Final URL for a network run; pass ``proxy_base_url`` to go through the relay."""
    url = inject_credential(endpoint_template, credential, aliases)
    if proxy_base_url:
        url = wrap_with_proxy(url, proxy_base_url)
    return url


def redact_url(url: str, aliases: Iterable[str]) -> str:
    """Mask the values of credential query parameters, host and path untouched.

    A relay's ``url`` argument is decoded, redacted and encoded again, so the
    credential inside a proxied URL is masked as well.
    """
    base, sep, rest = url.partition("?")
    if not sep:
        return url
    query, hash_sep, fragment = rest.partition("#")
    names = set(aliases)

    pieces = []
    for piece in query.split("&"):
        name, eq, value = piece.partition("=")
        key = unquote_plus(name)
        if eq and key in names:
            piece = f"{name}={REDACTED}"
        elif eq and key == "url":
            inner = redact_url(unquote(value), names)
            piece = f"{name}={quote(inner, safe=_URI_COMPONENT_SAFE + '[]')}"
        pieces.append(piece)
    return f"{base}?{'&'.join(pieces)}{hash_sep}{fragment}"
