"""Deterministic partial-document merge.

This is the only place where a partial update is combined with a stored
document. Semantics:

- Keys missing from the partial (or carrying :data:`ABSENT`) are left alone.
- When both sides hold a record (a mapping), the records merge recursively.
- Everything else (scalars, ``None``, lists, type mismatches) is replaced
  by the partial value. Lists are never merged element-wise.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from hubstate.exceptions import HubValidationError
from hubstate.models.state import HubState


class _Missing(enum.Enum):
    ABSENT = "ABSENT"

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Missing.ABSENT
"""Marks a partial field as "not provided", as opposed to an explicit ``None``."""


def _is_record(value: Any) -> bool:
    return isinstance(value, Mapping)


def deep_merge(base: Mapping[str, Any], partial: Mapping[str, Any]) -> dict[str, Any]:
    """Return *base* with *partial* merged in. Neither argument is mutated."""
    result = dict(base)
    for key, value in partial.items():
        if value is ABSENT:
            continue
        current = result.get(key)
        if _is_record(value) and _is_record(current):
            result[key] = deep_merge(current, value)
        elif _is_record(value):
            # New branch: merging into an empty record drops nested ABSENT markers.
            result[key] = deep_merge({}, value)
        else:
            result[key] = value
    return result


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "state"
    return f"{location}: {first.get('msg', 'invalid value')}"


def merge_state(state: HubState, partial: Mapping[str, Any]) -> HubState:
    """Merge a wire-keyed *partial* into *state* and re-validate the result.

    Raises :class:`HubValidationError` when the merged document no longer
    fits the hub state schema (e.g. ``privacy`` replaced by a string).
    """
    if not partial:
        return state
    merged = deep_merge(state.to_document(), partial)
    try:
        return HubState.model_validate(merged)
    except ValidationError as exc:
        raise HubValidationError(f"Invalid state update: {_describe(exc)}", field="state") from exc
