"""Registry of human-assigned display profiles."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import UTC, datetime

from hubstate._constants import avatar_for_name
from hubstate.models.profile import ProfileRecord

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ProfileRegistry:
    """Keyed store of :class:`ProfileRecord` by visitor handle. No deletion."""

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._profiles: dict[str, ProfileRecord] = {}

    def upsert(self, handle: str, name: str) -> ProfileRecord:
        """Set *name* (and its avatar) for *handle*, keeping the original ``created_at``."""
        now = self._clock()
        existing = self._profiles.get(handle)
        record = ProfileRecord(
            name=name,
            avatar=avatar_for_name(name),
            created_at=existing.created_at if existing is not None else now,
            last_seen=now,
        )
        self._profiles[handle] = record
        if existing is None or existing.name != name:
            _logger.info("Registered profile: %s for visitor: %s", name, handle)
        return record

    def touch(self, handle: str) -> ProfileRecord | None:
        """Refresh ``last_seen`` for an existing profile; unknown handles are ignored."""
        existing = self._profiles.get(handle)
        if existing is None:
            return None
        record = existing.model_copy(update={"last_seen": self._clock()})
        self._profiles[handle] = record
        return record

    def get(self, handle: str) -> ProfileRecord | None:
        return self._profiles.get(handle)

    def items(self) -> Iterator[tuple[str, ProfileRecord]]:
        return iter(list(self._profiles.items()))

    def __contains__(self, handle: object) -> bool:
        return handle in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)
