"""Display profile models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from hubstate.models._base import HubBaseModel
from hubstate.models.state import HubState


class ProfileRecord(HubBaseModel):
    """Human-assigned display identity of a visitor.

    Parameters
    ----------
    name : str
        Display name, e.g. ``"Mom"``.
    avatar : str
        Emoji derived from ``name``.
    created_at : datetime
        First registration time. Never changes afterwards.
    last_seen : datetime
        Last time the visitor registered or updated its state.
    """

    name: str
    avatar: str
    created_at: datetime
    last_seen: datetime


class ProfileRegistration(HubBaseModel):
    visitor_id: str
    profile: ProfileRecord


class ProfileListing(ProfileRecord):
    """Profile joined with the visitor's current state, if any."""

    visitor_id: str
    state: HubState | None = None


class VisitorDirectory(HubBaseModel):
    """Debug view over every known visitor."""

    visitor_ids: list[str] = Field(default_factory=list)
    profiles: dict[str, ProfileRecord] = Field(default_factory=dict)
    voice_mappings: dict[str, str] = Field(default_factory=dict)
