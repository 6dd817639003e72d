"""Voice history models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from hubstate.models._base import HubBaseModel


class HistoryEntry(HubBaseModel):
    """One recorded voice interaction. Never mutated after creation."""

    id: str
    """Entry id, ``vh-<epoch ms>-<random>``."""

    timestamp: datetime
    """When the interaction was recorded (UTC)."""

    intent: str
    """Intent tag sent by the voice runtime, ``UNKNOWN`` when missing."""

    utterance: str
    """What the user said, or a phrase derived from the intent."""

    response: Any = None
    """What the assistant answered, when the runtime reported it."""

    category: str
    """Coarse grouping derived from the intent (``routine``, ``grocery``...)."""

    active_view: str | None = None
    """Hub view that was active after the interaction."""


class AggregatedHistoryEntry(HistoryEntry):
    """History entry annotated with its owner for cross-visitor listings."""

    visitor_id: str
    user_name: str


class HistoryPage(HubBaseModel):
    """A page of one visitor's history."""

    enabled: bool
    visitor_id: str
    total: int = 0
    limit: int = 0
    offset: int = 0
    entries: list[HistoryEntry] = Field(default_factory=list)


class HistoryDeletion(HubBaseModel):
    """Outcome of deleting one visitor's history (or one entry of it)."""

    visitor_id: str
    deleted: int
    entry_id: str | None = None
    deleted_at: datetime


class HistoryClearResult(HubBaseModel):
    """Outcome of clearing every visitor's history."""

    total_deleted: int
    users_affected: list[str] = Field(default_factory=list)
    deleted_at: datetime
