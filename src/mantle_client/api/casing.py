"""
Payload shaping helpers.

The Mantle API expects camelCase keys while callers pass snake_case
keyword arguments. Optional values that were not supplied are left out of
payloads and query strings rather than sent as null.
"""

import re
from typing import Any, Dict, Mapping, Optional

import httpx


_SNAKE_SEGMENT = re.compile(r"_([a-z])")


def to_camel_case(key: str) -> str:
    """Convert a snake_case key to camelCase (``event_name`` -> ``eventName``)."""
    return _SNAKE_SEGMENT.sub(lambda match: match.group(1).upper(), str(key))


def camelize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Rename the top-level keys of a mapping to camelCase.

    Nested values are passed through untouched, so a ``properties`` mapping
    keeps whatever keys the caller chose.
    """
    return {to_camel_case(key): value for key, value in data.items()}


def compact(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop entries whose value is None."""
    return {key: value for key, value in data.items() if value is not None}


def build_path(path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Append a query string built from ``params`` to ``path``.

    Absent values are omitted and insertion order is kept. The path is
    returned unchanged when nothing remains.
    """
    query = compact(params or {})
    if not query:
        return path
    return f"{path}?{httpx.QueryParams(query)}"
