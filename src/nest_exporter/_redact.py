"""Helpers for safe debug logging.

The exporter holds a long-lived bearer token and the auth helper handles
client secrets.  Payloads and headers pass through :func:`redact_for_log`
before they reach DEBUG logs.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "access_token",
        "authorization",
        "client_secret",
        "code",
        "refresh_token",
        "token",
    }
)

_BEARER = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* with secrets masked and long strings cut."""
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, str):
        text = _BEARER.sub(r"\1<redacted>", value)
        if len(text) > max_string:
            return f"{text[:max_string]}…<truncated>"
        return text

    if isinstance(value, Mapping):
        return {
            str(k): "<redacted>"
            if str(k).lower() in _SENSITIVE_VALUE_KEYS
            else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
