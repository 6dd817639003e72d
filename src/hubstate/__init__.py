"""hubstate - State reconciliation backend for the everyday tasks hub."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("hubstate")
except PackageNotFoundError:
    __version__ = "0+local"
from hubstate.config import HubConfig
from hubstate.engine import HubEngine
from hubstate.exceptions import (
    HubConfigError,
    HubError,
    HubInternalError,
    HubNotFoundError,
    HubValidationError,
)
from hubstate.models import (
    HistoryEntry,
    HistoryPage,
    HubState,
    PrivacySettings,
    ProfileListing,
    ProfileRecord,
    StateUpdateResult,
    TaskDefinition,
)
from hubstate.state.history import HistoryLog
from hubstate.state.identity import IdentityResolver
from hubstate.state.merge import ABSENT, deep_merge, merge_state
from hubstate.state.profiles import ProfileRegistry
from hubstate.state.store import StateStore

__all__ = [
    "__version__",
    "ABSENT",
    "HistoryEntry",
    "HistoryLog",
    "HistoryPage",
    "HubConfig",
    "HubConfigError",
    "HubEngine",
    "HubError",
    "HubInternalError",
    "HubNotFoundError",
    "HubState",
    "HubValidationError",
    "IdentityResolver",
    "PrivacySettings",
    "ProfileListing",
    "ProfileRecord",
    "ProfileRegistry",
    "StateStore",
    "StateUpdateResult",
    "TaskDefinition",
    "deep_merge",
    "merge_state",
]
