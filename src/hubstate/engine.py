"""State reconciliation engine for the everyday tasks hub."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from hubstate._constants import SERVICE_NAME
from hubstate._redact import mask_voice_id, redact_for_log
from hubstate.config import HubConfig
from hubstate.exceptions import HubInternalError, HubNotFoundError, HubValidationError
from hubstate.models.grocery import GroceryAggregate, GroceryClearResult, GroceryItem
from hubstate.models.history import (
    AggregatedHistoryEntry,
    HistoryClearResult,
    HistoryDeletion,
    HistoryPage,
)
from hubstate.models.profile import ProfileListing, ProfileRegistration, VisitorDirectory
from hubstate.models.state import (
    DebugInfo,
    HealthStatus,
    HubState,
    PrivacySettings,
    StateUpdateResult,
    TaskDefinition,
    default_tasks,
)
from hubstate.state.history import HistoryLog, build_history_entry, history_allowed
from hubstate.state.identity import IdentityResolver
from hubstate.state.merge import merge_state
from hubstate.state.profiles import ProfileRegistry
from hubstate.state.store import StateStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _require(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise HubValidationError(f"{field} is required", field=field)
    return value.strip()


class HubEngine:
    """Reconciles partial updates from the voice runtime and the web frontend.

    Every mutating operation follows the same order: resolve the caller,
    fetch (or create) the visitor's document, compute the new document,
    record history, and persist last. An exception raised before the final
    ``put`` therefore leaves the stored document untouched.

    All collaborators can be injected so tests get isolated instances::

        engine = HubEngine(HubConfig(), clock=lambda: fixed_now)
        result = engine.update_state("amzn1.ask.account.X", {"lastAction": "LIGHTS_ON"})
    """

    def __init__(
        self,
        config: HubConfig | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        resolver: IdentityResolver | None = None,
        store: StateStore | None = None,
        history: HistoryLog | None = None,
        profiles: ProfileRegistry | None = None,
    ) -> None:
        self._config = config or HubConfig()
        self._clock = clock
        if resolver is None:
            resolver = IdentityResolver(
                voice_id_prefix=self._config.voice_id_prefix,
                handle_prefix=self._config.voice_handle_prefix,
            )
        if store is None:
            store = StateStore(clock=clock, voice_handle_prefix=self._config.voice_handle_prefix)
        if history is None:
            history = HistoryLog(
                capacity=self._config.history_capacity,
                snapshot_size=self._config.history_snapshot_size,
            )
        if profiles is None:
            profiles = ProfileRegistry(clock=clock)
        self._resolver = resolver
        self._store = store
        self._history = history
        self._profiles = profiles

    @property
    def config(self) -> HubConfig:
        return self._config

    @property
    def resolver(self) -> IdentityResolver:
        return self._resolver

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def history(self) -> HistoryLog:
        return self._history

    @property
    def profiles(self) -> ProfileRegistry:
        return self._profiles

    def _persist(self, handle: str, state: HubState) -> None:
        try:
            self._store.put(handle, state)
        except Exception as exc:
            raise HubInternalError(f"Could not persist state for visitor {handle}") from exc

    def _user_name(self, handle: str) -> str:
        profile = self._profiles.get(handle)
        return profile.name if profile is not None else handle

    # ------------------------------------------------------------------
    # Per-visitor state
    # ------------------------------------------------------------------

    def update_state(
        self,
        external_id: str,
        partial: Mapping[str, Any] | None = None,
        display_name: str | None = None,
    ) -> StateUpdateResult:
        """Merge *partial* into the caller's hub state.

        Voice callers get a history entry derived from the update unless
        their privacy settings disable history. A non-empty *display_name*
        is stored on the state and registered as the visitor's profile.
        """
        external_id = _require(external_id, "userId")
        partial = dict(partial or {})
        handle = self._resolver.resolve(external_id)
        prefix = self._config.voice_id_prefix
        _logger.debug("Update for %s: %s", handle, redact_for_log(partial, prefix=prefix))

        current = self._store.get_or_create(handle)
        merged = merge_state(current, partial)
        now = self._clock()

        is_voice = self._resolver.is_voice_caller(external_id)
        debug = merged.debug_info or DebugInfo()
        updates: dict[str, Any] = {
            "debug_info": debug.model_copy(
                update={
                    "last_updated": now,
                    "is_voice_user": is_voice,
                    "original_voice_id": mask_voice_id(external_id, prefix=prefix) if is_voice else None,
                }
            ),
        }
        if display_name:
            updates["display_name"] = display_name
        merged = merged.model_copy(update=updates)

        if history_allowed(external_id, merged.privacy, voice_id_prefix=prefix):
            entry = build_history_entry(partial, merged, now=now)
            snapshot = self._history.record(handle, entry)
            merged = merged.model_copy(update={"voice_history": snapshot})

        self._persist(handle, merged)

        if display_name:
            self._profiles.upsert(handle, display_name)
        else:
            self._profiles.touch(handle)

        _logger.info("Updated state for visitor: %s", handle)
        _logger.info("Active view: %s, Last action: %s", merged.active_view, merged.last_action)
        return StateUpdateResult(visitor_id=handle, state=merged)

    def get_state(self, external_id: str) -> HubState:
        external_id = _require(external_id, "userId")
        handle = self._resolver.resolve(external_id)
        state = self._store.get_or_create(handle)
        # Polled by frontends; only voice visitors are logged.
        if self._resolver.is_voice_handle(handle):
            _logger.debug("Fetched state for voice visitor: %s", handle)
        return state

    def reset_state(self, external_id: str) -> HubState:
        """Replace the caller's state with a brand-new default document.

        History entries are kept by the history log; only the mirror on the
        state is cleared.
        """
        external_id = _require(external_id, "userId")
        handle = self._resolver.resolve(external_id)
        state = self._store.reset(handle)
        _logger.info("Reset state for visitor: %s", handle)
        return state

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def register_profile(self, external_id: str, name: str) -> ProfileRegistration:
        external_id = _require(external_id, "userId")
        name = _require(name, "name")
        handle = self._resolver.resolve(external_id)

        state = self._store.get_or_create(handle)
        self._persist(handle, state.model_copy(update={"display_name": name, "profile": name.lower()}))
        record = self._profiles.upsert(handle, name)
        return ProfileRegistration(visitor_id=handle, profile=record)

    def list_profiles(self) -> list[ProfileListing]:
        """Every registered profile with its linked state, most recently seen first."""
        listings = [
            ProfileListing(
                visitor_id=handle,
                name=record.name,
                avatar=record.avatar,
                created_at=record.created_at,
                last_seen=record.last_seen,
                state=self._store.get(handle),
            )
            for handle, record in self._profiles.items()
        ]
        listings.sort(key=lambda listing: listing.last_seen, reverse=True)
        return listings

    # ------------------------------------------------------------------
    # Voice history
    # ------------------------------------------------------------------

    def get_history(self, external_id: str, limit: int | None = None, offset: int = 0) -> HistoryPage:
        external_id = _require(external_id, "userId")
        if limit is None:
            limit = self._config.default_history_limit
        if limit < 0 or offset < 0:
            raise HubValidationError("limit and offset must be non-negative", field="limit")

        handle = self._resolver.resolve(external_id)
        state = self._store.get(handle)
        if state is not None and not state.history_enabled:
            return HistoryPage(enabled=False, visitor_id=handle)

        return HistoryPage(
            enabled=True,
            visitor_id=handle,
            total=self._history.total(handle),
            limit=limit,
            offset=offset,
            entries=self._history.list_entries(handle, limit=limit, offset=offset),
        )

    def _sync_history_mirror(self, handle: str, now: datetime) -> None:
        state = self._store.get(handle)
        if state is None:
            return
        privacy = (state.privacy or PrivacySettings()).model_copy(update={"last_history_delete": now})
        self._persist(
            handle,
            state.model_copy(update={"voice_history": self._history.recent(handle), "privacy": privacy}),
        )

    def delete_history(self, external_id: str, entry_id: str | None = None) -> HistoryDeletion:
        """Delete all of the caller's history, or only *entry_id*.

        Raises :class:`HubNotFoundError` when a single entry is requested
        and either the visitor has no history or the id is unknown.
        """
        external_id = _require(external_id, "userId")
        handle = self._resolver.resolve(external_id)
        now = self._clock()

        if entry_id is None:
            deleted = self._history.delete_all(handle)
            self._sync_history_mirror(handle, now)
            _logger.info("Deleted voice history for visitor: %s", handle)
            return HistoryDeletion(visitor_id=handle, deleted=deleted, deleted_at=now)

        if not self._history.has_visitor(handle):
            raise HubNotFoundError("No history found for user", visitor_id=handle, entry_id=entry_id)
        if not self._history.delete_one(handle, entry_id):
            raise HubNotFoundError("History entry not found", visitor_id=handle, entry_id=entry_id)

        self._sync_history_mirror(handle, now)
        _logger.info("Deleted history entry %s for visitor: %s", entry_id, handle)
        return HistoryDeletion(visitor_id=handle, deleted=1, entry_id=entry_id, deleted_at=now)

    def toggle_history(self, external_id: str, enabled: bool = True, clear_history: bool = False) -> PrivacySettings:
        """Switch history collection on or off, optionally wiping it when turning off."""
        external_id = _require(external_id, "userId")
        handle = self._resolver.resolve(external_id)
        state = self._store.get_or_create(handle)

        privacy = (state.privacy or PrivacySettings()).model_copy(update={"allow_voice_history": enabled})
        updates: dict[str, Any] = {}
        if not enabled and clear_history:
            self._history.delete_all(handle)
            privacy = privacy.model_copy(update={"last_history_delete": self._clock()})
            updates["voice_history"] = []
        updates["privacy"] = privacy

        self._persist(handle, state.model_copy(update=updates))
        _logger.info("Voice history %s for visitor: %s", "enabled" if enabled else "disabled", handle)
        return privacy

    # ------------------------------------------------------------------
    # Cross-visitor views
    # ------------------------------------------------------------------

    def aggregate_grocery_items(self) -> GroceryAggregate:
        """Collect every visitor's grocery list (plus pending item) in one list."""
        items: list[GroceryItem] = []
        user_count = 0
        for handle, state in self._store.items():
            user_count += 1
            user_name = self._user_name(handle)
            added_at = (state.debug_info.last_updated if state.debug_info else None) or self._clock()
            for index, item in enumerate(state.grocery_list):
                items.append(
                    GroceryItem(
                        id=f"{handle}-{index}",
                        item=item,
                        visitor_id=handle,
                        user_name=user_name,
                        added_at=added_at,
                    )
                )
            if state.pending_item:
                items.append(
                    GroceryItem(
                        id=f"{handle}-pending",
                        item=state.pending_item,
                        visitor_id=handle,
                        user_name=user_name,
                        is_pending=True,
                        added_at=added_at,
                    )
                )

        _logger.info("Fetched all grocery items: %d items from %d users", len(items), user_count)
        return GroceryAggregate(items=items, total_items=len(items), user_count=user_count)

    def clear_all_grocery_items(self) -> GroceryClearResult:
        total = 0
        affected: list[str] = []
        for handle, state in self._store.items():
            count = len(state.grocery_list) + (1 if state.pending_item else 0)
            if count > 0:
                total += count
                affected.append(handle)
            self._persist(handle, state.model_copy(update={"grocery_list": [], "pending_item": None}))

        _logger.info("Cleared ALL grocery lists: %d items from %d users", total, len(affected))
        return GroceryClearResult(total_cleared=total, users_affected=affected)

    def aggregate_history(self, limit: int | None = None) -> list[AggregatedHistoryEntry]:
        """Every visitor's history merged into one list, newest first."""
        if limit is None:
            limit = self._config.default_history_limit
        if limit < 0:
            raise HubValidationError("limit must be non-negative", field="limit")

        collected: list[AggregatedHistoryEntry] = []
        for handle, entries in self._history.items():
            user_name = self._user_name(handle)
            collected.extend(
                AggregatedHistoryEntry(**entry.model_dump(), visitor_id=handle, user_name=user_name)
                for entry in entries
            )
        collected.sort(key=lambda entry: entry.timestamp, reverse=True)
        collected = collected[:limit]

        _logger.info("Fetched all voice history: %d entries", len(collected))
        return collected

    def clear_all_history(self) -> HistoryClearResult:
        now = self._clock()
        removed = self._history.delete_all_visitors()
        for handle in removed:
            self._sync_history_mirror(handle, now)
        affected = [handle for handle, count in removed.items() if count > 0]
        total = sum(removed.values())

        _logger.info("Deleted ALL voice history: %d entries from %d users", total, len(affected))
        _logger.info("Users affected: %s", ", ".join(affected) or "none")
        return HistoryClearResult(total_deleted=total, users_affected=affected, deleted_at=now)

    # ------------------------------------------------------------------
    # Catalog and diagnostics
    # ------------------------------------------------------------------

    def list_tasks(self) -> list[TaskDefinition]:
        return default_tasks()

    def list_visitors(self) -> VisitorDirectory:
        """Debug listing; voice ids are clipped before they leave the engine."""
        return VisitorDirectory(
            visitor_ids=self._store.visitor_ids(),
            profiles=dict(self._profiles.items()),
            voice_mappings={
                mask_voice_id(voice_id, prefix=self._config.voice_id_prefix): handle
                for voice_id, handle in self._resolver.mappings().items()
            },
        )

    def health(self) -> HealthStatus:
        return HealthStatus(
            timestamp=self._clock(),
            service=SERVICE_NAME,
            active_visitors=len(self._store),
            registered_profiles=len(self._profiles),
        )
