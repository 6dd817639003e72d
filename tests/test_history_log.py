from __future__ import annotations

from datetime import UTC, datetime, timedelta

from hubstate._constants import category_for_intent, utterance_for_intent
from hubstate.models.history import HistoryEntry
from hubstate.models.state import HubState, PrivacySettings
from hubstate.state.history import HistoryLog, build_history_entry, history_allowed
from hubstate.state.merge import ABSENT

VOICE_ID = "amzn1.ask.account.TEST"


def _dt(offset: int = 0) -> datetime:
    return datetime(2026, 1, 1, tzinfo=UTC) + timedelta(seconds=offset)


def _entry(index: int) -> HistoryEntry:
    return HistoryEntry(
        id=f"vh-{index}",
        timestamp=_dt(index),
        intent=f"INTENT_{index}",
        utterance=f'"INTENT_{index}"',
        category="general",
    )


class TestHistoryLog:
    def test_newest_entry_first(self) -> None:
        log = HistoryLog()
        log.record("alexa-user-1", _entry(1))
        log.record("alexa-user-1", _entry(2))

        assert [e.id for e in log.list_entries("alexa-user-1")] == ["vh-2", "vh-1"]

    def test_capacity_keeps_most_recent_in_insertion_order(self) -> None:
        log = HistoryLog(capacity=100)
        for index in range(130):
            log.record("alexa-user-1", _entry(index))

        entries = log.list_entries("alexa-user-1")
        assert log.total("alexa-user-1") == 100
        assert [e.id for e in entries] == [f"vh-{i}" for i in range(129, 29, -1)]

    def test_eviction_follows_insertion_not_timestamp(self) -> None:
        log = HistoryLog(capacity=2)
        # Same timestamp for all three: rank is decided by insertion only.
        for entry_id in ("a", "b", "c"):
            log.record("v", _entry(0).model_copy(update={"id": entry_id}))

        assert [e.id for e in log.list_entries("v")] == ["c", "b"]

    def test_record_returns_snapshot_of_newest_entries(self) -> None:
        log = HistoryLog(snapshot_size=10)
        snapshot: list[HistoryEntry] = []
        for index in range(15):
            snapshot = log.record("v", _entry(index))

        assert [e.id for e in snapshot] == [f"vh-{i}" for i in range(14, 4, -1)]

    def test_pagination(self) -> None:
        log = HistoryLog()
        for index in range(5):
            log.record("v", _entry(index))

        assert [e.id for e in log.list_entries("v", limit=2, offset=1)] == ["vh-3", "vh-2"]
        assert log.list_entries("v", limit=10, offset=10) == []
        assert log.list_entries("unknown") == []

    def test_delete_one_unknown_id_leaves_buffer_unchanged(self) -> None:
        log = HistoryLog()
        log.record("v", _entry(1))
        log.record("v", _entry(2))

        assert log.delete_one("v", "vh-missing") is False
        assert [e.id for e in log.list_entries("v")] == ["vh-2", "vh-1"]
        assert log.delete_one("nobody", "vh-1") is False

    def test_delete_one(self) -> None:
        log = HistoryLog()
        log.record("v", _entry(1))
        log.record("v", _entry(2))

        assert log.delete_one("v", "vh-1") is True
        assert [e.id for e in log.list_entries("v")] == ["vh-2"]

    def test_delete_all_and_all_visitors(self) -> None:
        log = HistoryLog()
        log.record("a", _entry(1))
        log.record("a", _entry(2))
        log.record("b", _entry(3))

        assert log.delete_all("a") == 2
        assert log.has_visitor("a")
        assert log.delete_all_visitors() == {"a": 0, "b": 1}
        assert len(log) == 0

    def test_delete_all_for_unknown_visitor_allocates_nothing(self) -> None:
        log = HistoryLog()

        assert log.delete_all("nobody") == 0
        assert not log.has_visitor("nobody")
        assert log.delete_all_visitors() == {}


class TestEligibility:
    def test_only_voice_callers_are_recorded(self) -> None:
        assert history_allowed(VOICE_ID, PrivacySettings())
        assert not history_allowed("web-guest-1", PrivacySettings())

    def test_privacy_switch(self) -> None:
        assert not history_allowed(VOICE_ID, PrivacySettings(allow_voice_history=False))
        assert history_allowed(VOICE_ID, PrivacySettings(allow_voice_history=None))
        assert history_allowed(VOICE_ID, None)


class TestDerivedFields:
    def test_known_intent(self) -> None:
        assert utterance_for_intent("LIGHTS_OFF") == '"Turn off the lights"'
        assert category_for_intent("LIGHTS_OFF") == "home"

    def test_unknown_intent_is_quoted(self) -> None:
        assert utterance_for_intent("DANCE") == '"DANCE"'
        assert category_for_intent("DANCE") == "general"

    def test_missing_intent(self) -> None:
        assert utterance_for_intent(None) == '"Voice command"'
        assert category_for_intent(None) == "general"

    def test_build_entry_from_partial(self) -> None:
        state = HubState.default("alexa-user-1", now=_dt()).model_copy(update={"active_view": "grocery"})
        entry = build_history_entry({"lastAction": "ADD_ITEM", "lastResponse": "Added milk"}, state, now=_dt())

        assert entry.intent == "ADD_ITEM"
        assert entry.utterance == '"Add [item] to grocery list"'
        assert entry.response == "Added milk"
        assert entry.category == "grocery"
        assert entry.active_view == "grocery"
        assert entry.id.startswith("vh-1767225600000-")

    def test_build_entry_prefers_caller_utterance_and_view(self) -> None:
        state = HubState.default("alexa-user-1", now=_dt())
        entry = build_history_entry(
            {"lastAction": ABSENT, "lastUtterance": "what's up", "activeView": "privacy"},
            state,
            now=_dt(),
        )

        assert entry.intent == "UNKNOWN"
        assert entry.utterance == "what's up"
        assert entry.category == "general"
        assert entry.active_view == "privacy"
        assert entry.response is None

    def test_non_text_fields_fall_back_to_derived_values(self) -> None:
        state = HubState.default("alexa-user-1", now=_dt()).model_copy(update={"active_view": "grocery"})
        entry = build_history_entry(
            {"lastAction": "HELP", "lastUtterance": 42, "activeView": {"name": "tasks"}},
            state,
            now=_dt(),
        )

        assert entry.intent == "HELP"
        assert entry.utterance == utterance_for_intent("HELP")
        assert entry.active_view == "grocery"
