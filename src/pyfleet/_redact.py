"""Helpers for safe debug logging.

The Roads service authenticates with an API key carried in the query
string.  This module redacts such secrets before URLs and payloads are
emitted to DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "key",
        "apikey",
        "api_key",
        "roads_api_key",
        "password",
        "token",
        "access_token",
        "authorization",
        "cookie",
    }
)


def redact_url(url: str) -> str:
    """Return *url* with sensitive query parameters replaced."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (name, "<redacted>" if _is_sensitive(name) else value)
        for name, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="<>|,")))


def _is_sensitive(key: Any) -> bool:
    return str(key).lower() in _SENSITIVE_VALUE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Mapping entries whose key names a secret are replaced, long strings
    are truncated to *max_string* characters and nesting is cut off
    after 20 levels.
    """
    if _depth > 20:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    def _child(item: Any) -> Any:
        return redact_for_log(item, max_string=max_string, _depth=_depth + 1)

    if isinstance(value, Mapping):
        return {str(k): "<redacted>" if _is_sensitive(k) else _child(v) for k, v in value.items()}
    if isinstance(value, Sequence):
        return [_child(item) for item in value]
    return repr(value)
