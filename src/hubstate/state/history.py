"""Bounded per-visitor voice history.

The history log is the authoritative owner of every :class:`HistoryEntry`.
Entries are kept newest first; when a visitor's buffer is full the oldest
entry is evicted on append. Hub states only carry a short mirror of the
newest entries (see :meth:`HistoryLog.recent`).
"""

from __future__ import annotations

import itertools
import logging
import secrets
from collections import deque
from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any

from hubstate._constants import (
    HISTORY_CAPACITY,
    HISTORY_SNAPSHOT_SIZE,
    UNKNOWN_INTENT,
    VOICE_ID_PREFIX,
    category_for_intent,
    utterance_for_intent,
)
from hubstate.models.history import HistoryEntry
from hubstate.models.state import HubState, PrivacySettings
from hubstate.state.merge import ABSENT

_logger = logging.getLogger(__name__)


def history_allowed(
    external_id: str,
    privacy: PrivacySettings | None,
    *,
    voice_id_prefix: str = VOICE_ID_PREFIX,
) -> bool:
    """Privacy gate: only voice callers that have not switched history off are recorded."""
    if not external_id.startswith(voice_id_prefix):
        return False
    return privacy is None or privacy.history_enabled


def new_entry_id(now: datetime) -> str:
    return f"vh-{int(now.timestamp() * 1000)}-{secrets.token_hex(5)[:9]}"


def _provided(partial: Mapping[str, Any], key: str) -> Any:
    value = partial.get(key)
    return None if value is ABSENT else value


def _text(partial: Mapping[str, Any], key: str) -> str | None:
    value = _provided(partial, key)
    return value if isinstance(value, str) and value else None


def build_history_entry(partial: Mapping[str, Any], state: HubState, *, now: datetime) -> HistoryEntry:
    """Derive a history entry from an inbound partial update.

    ``partial`` is the raw wire-keyed update; ``state`` is the merged
    document, used for the active view when the update did not change it.
    """
    intent = _text(partial, "lastAction")
    return HistoryEntry(
        id=new_entry_id(now),
        timestamp=now,
        intent=intent or UNKNOWN_INTENT,
        utterance=_text(partial, "lastUtterance") or utterance_for_intent(intent),
        response=_provided(partial, "lastResponse") or None,
        category=category_for_intent(intent),
        active_view=_text(partial, "activeView") or state.active_view,
    )


class HistoryLog:
    """Per-visitor ring buffers of :class:`HistoryEntry`, newest first."""

    def __init__(
        self,
        *,
        capacity: int = HISTORY_CAPACITY,
        snapshot_size: int = HISTORY_SNAPSHOT_SIZE,
    ) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._snapshot_size = snapshot_size
        self._entries: dict[str, deque[HistoryEntry]] = {}

    @property
    def capacity(self) -> int:
        return self._capacity

    def _buffer(self, handle: str) -> deque[HistoryEntry]:
        buffer = self._entries.get(handle)
        if buffer is None:
            buffer = deque(maxlen=self._capacity)
            self._entries[handle] = buffer
        return buffer

    def record(self, handle: str, entry: HistoryEntry) -> list[HistoryEntry]:
        """Prepend *entry* and return the refreshed snapshot for the hub state.

        A full buffer drops its oldest entry as part of the same append.
        """
        self._buffer(handle).appendleft(entry)
        _logger.info("Recorded voice history: %s", entry.intent)
        return self.recent(handle)

    def recent(self, handle: str) -> list[HistoryEntry]:
        """The newest ``snapshot_size`` entries for *handle*."""
        return self.list_entries(handle, limit=self._snapshot_size)

    def list_entries(self, handle: str, limit: int | None = None, offset: int = 0) -> list[HistoryEntry]:
        buffer = self._entries.get(handle)
        if not buffer:
            return []
        stop = None if limit is None else offset + limit
        return list(itertools.islice(buffer, offset, stop))

    def total(self, handle: str) -> int:
        return len(self._entries.get(handle, ()))

    def has_visitor(self, handle: str) -> bool:
        return handle in self._entries

    def delete_all(self, handle: str) -> int:
        """Drop every entry of *handle*; returns how many were removed."""
        buffer = self._entries.get(handle)
        if buffer is None:
            return 0
        removed = len(buffer)
        buffer.clear()
        return removed

    def delete_one(self, handle: str, entry_id: str) -> bool:
        """Drop the entry with *entry_id*; ``False`` (and no change) if it is unknown."""
        buffer = self._entries.get(handle)
        if buffer is None:
            return False
        for entry in buffer:
            if entry.id == entry_id:
                buffer.remove(entry)
                return True
        return False

    def delete_all_visitors(self) -> dict[str, int]:
        """Clear every buffer; returns removed counts keyed by handle."""
        removed: dict[str, int] = {}
        for handle in list(self._entries):
            removed[handle] = self.delete_all(handle)
        return removed

    def items(self) -> Iterator[tuple[str, list[HistoryEntry]]]:
        for handle, buffer in list(self._entries.items()):
            yield handle, list(buffer)

    def __len__(self) -> int:
        return sum(len(buffer) for buffer in self._entries.values())
