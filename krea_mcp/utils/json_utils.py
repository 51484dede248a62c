"""Helpers for pulling values out of untyped vendor JSON.

Job records are treated as opaque: the server only reads a handful of fields
by path and scans for result URLs. None of these helpers raise on unexpected
shapes; missing structure reads as ``None``.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlsplit

_HTTP_SCHEMES = frozenset({"http", "https"})


def read_unknown(obj: Any, *path: str) -> Any:
    """Walk ``path`` through nested dicts; ``None`` as soon as a segment is missing."""
    current = obj
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def read_string(obj: Any, *path: str) -> str | None:
    value = read_unknown(obj, *path)
    return value if isinstance(value, str) else None


def as_object(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def pick_job(raw_response: Any) -> dict[str, Any]:
    """Return the job record from a create/get response.

    Accepts both a bare job record and a ``{"job": {...}}`` wrapper. Anything
    that is not a dict yields an empty record.
    """
    if isinstance(raw_response, dict):
        job = raw_response.get("job")
        if isinstance(job, dict):
            return job
        return raw_response
    return {}


def looks_like_http_url(value: str) -> bool:
    """True for absolute http(s) URLs with a usable host.

    ``urlsplit`` does not validate, so the host, the port and whitespace in
    the network location are checked here.
    """
    try:
        parts = urlsplit(value)
        if parts.scheme.lower() not in _HTTP_SCHEMES or not parts.hostname:
            return False
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    return not any(ch.isspace() for ch in parts.netloc)


def extract_http_urls(value: Any) -> list[str]:
    """Collect every http(s) URL string anywhere inside ``value``.

    Iterative depth-first walk with an explicit stack, so deeply nested
    payloads do not hit the recursion limit. Results are de-duplicated; the
    order carries no meaning.
    """
    found: dict[str, None] = {}
    stack: list[Any] = [value]

    while stack:
        current = stack.pop()
        if isinstance(current, str):
            if looks_like_http_url(current):
                found[current] = None
        elif isinstance(current, list):
            stack.extend(current)
        elif isinstance(current, dict):
            stack.extend(current.values())

    return list(found)


def stringify_unknown(value: Any) -> str:
    """Render any JSON-ish value for messages: strings as-is, else compact JSON."""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError):
        return str(value)


__all__ = [
    "read_unknown",
    "read_string",
    "as_object",
    "pick_job",
    "looks_like_http_url",
    "extract_http_urls",
    "stringify_unknown",
]
