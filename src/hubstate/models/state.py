"""Hub state document and its nested records."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, StrictBool

from hubstate._constants import DEFAULT_TASKS
from hubstate.models._base import HubBaseModel, HubDocument
from hubstate.models.history import HistoryEntry


class TaskDefinition(HubDocument):
    """A hub task tile."""

    id: str
    title: str
    icon: str | None = None
    description: str | None = None
    category: str | None = None
    voice_command: str | None = None


def default_tasks() -> list[TaskDefinition]:
    """Fresh copy of the static task catalog."""
    return [TaskDefinition.model_validate(task) for task in DEFAULT_TASKS]


class RoutineResult(HubDocument):
    """Outcome of the last routine the voice runtime ran."""

    lights: Any = None
    thermostat: Any = None
    reminder: Any = None


class PrivacySettings(HubDocument):
    """Per-visitor privacy switches.

    The switches only accept real booleans; ``0`` or ``"no"`` is rejected
    rather than coerced into a disabled switch.
    """

    microphone_enabled: StrictBool | None = True
    allow_voice_history: StrictBool | None = True
    last_history_delete: datetime | None = None

    @property
    def history_enabled(self) -> bool:
        """Only an explicit ``False`` disables history collection."""
        return self.allow_voice_history is not False


class DebugInfo(HubDocument):
    """Diagnostics stamped on every update."""

    last_updated: datetime | None = None
    last_voice_request: Any = None
    is_voice_user: bool | None = False
    original_voice_id: str | None = None


class HubState(HubDocument):
    """The authoritative per-visitor hub document.

    Nested records merge field by field; lists are replaced wholesale.
    ``voice_history`` is a read-only mirror of the newest history entries,
    the history log owns the full list.
    """

    visitor_id: str
    display_name: str | None = None
    active_view: str | None = "home"
    last_action: str | None = "NONE"
    profile: str | None = "default"
    routine_result: RoutineResult | None = Field(default_factory=RoutineResult)
    grocery_list: list[Any] = Field(default_factory=list)
    pending_item: Any = None
    privacy: PrivacySettings | None = Field(default_factory=PrivacySettings)
    voice_history: list[HistoryEntry] = Field(default_factory=list)
    tasks: list[TaskDefinition] = Field(default_factory=default_tasks)
    custom_tasks: list[Any] = Field(default_factory=list)
    debug_info: DebugInfo | None = Field(default_factory=DebugInfo)

    @classmethod
    def default(cls, visitor_id: str, *, now: datetime, is_voice_user: bool = False) -> HubState:
        """Build the document a brand-new visitor starts with."""
        return cls(
            visitor_id=visitor_id,
            debug_info=DebugInfo(last_updated=now, is_voice_user=is_voice_user),
        )

    @property
    def history_enabled(self) -> bool:
        """Whether history may be collected; a missing privacy record means yes."""
        return self.privacy is None or self.privacy.history_enabled


class StateUpdateResult(HubBaseModel):
    """Merged state returned by an update, with the handle it was stored under."""

    visitor_id: str
    state: HubState


class HealthStatus(HubBaseModel):
    status: str = "ok"
    timestamp: datetime
    service: str
    active_visitors: int
    registered_profiles: int
