"""Helpers for safe debug logging.

Voice-platform identifiers are long, stable and tied to a real account.
This module provides a small utility to mask them (and clip oversized
strings) before emitting DEBUG logs or debug payloads.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from hubstate._constants import VOICE_ID_PREFIX, VOICE_ID_VISIBLE_CHARS

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "userid",
        "externalid",
        "alexauserid",
        "originalvoiceid",
    }
)


def mask_voice_id(value: str, *, prefix: str = VOICE_ID_PREFIX) -> str:
    """Return a clipped form of a voice-platform id, other ids unchanged."""
    if not value.startswith(prefix):
        return value
    return f"{value[:VOICE_ID_VISIBLE_CHARS]}..."


def redact_for_log(
    value: Any,
    *,
    max_string: int = 512,
    prefix: str = VOICE_ID_PREFIX,
    _depth: int = 0,
) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if value.startswith(prefix):
            return mask_voice_id(value, prefix=prefix)
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.startswith(prefix):
                key = mask_voice_id(key, prefix=prefix)
            if key.lower() in _SENSITIVE_VALUE_KEYS and isinstance(v, str):
                redacted[key] = mask_voice_id(v, prefix=prefix)
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, prefix=prefix, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, prefix=prefix, _depth=_depth + 1) for v in value]

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)
