"""Data models for hub documents and requests."""

from hubstate.models._base import HubBaseModel, HubDocument
from hubstate.models.grocery import GroceryAggregate, GroceryClearResult, GroceryItem
from hubstate.models.history import (
    AggregatedHistoryEntry,
    HistoryClearResult,
    HistoryDeletion,
    HistoryEntry,
    HistoryPage,
)
from hubstate.models.profile import ProfileListing, ProfileRecord, ProfileRegistration, VisitorDirectory
from hubstate.models.state import (
    DebugInfo,
    HealthStatus,
    HubState,
    PrivacySettings,
    RoutineResult,
    StateUpdateResult,
    TaskDefinition,
    default_tasks,
)

__all__ = [
    "AggregatedHistoryEntry",
    "DebugInfo",
    "GroceryAggregate",
    "GroceryClearResult",
    "GroceryItem",
    "HealthStatus",
    "HistoryClearResult",
    "HistoryDeletion",
    "HistoryEntry",
    "HistoryPage",
    "HubBaseModel",
    "HubDocument",
    "HubState",
    "PrivacySettings",
    "ProfileListing",
    "ProfileRecord",
    "ProfileRegistration",
    "RoutineResult",
    "StateUpdateResult",
    "TaskDefinition",
    "VisitorDirectory",
    "default_tasks",
]
