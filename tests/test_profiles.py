from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from hubstate._constants import DEFAULT_AVATAR, PARENT_AVATAR, avatar_for_name
from hubstate.state.profiles import ProfileRegistry


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.mark.parametrize(
    ("name", "avatar"),
    [
        ("Mom", PARENT_AVATAR),
        ("MAMA BEAR", PARENT_AVATAR),
        ("Dad", "👨"),
        ("the kid", "👦"),
        ("Daughter", "👧"),
        ("Grandma", "👵"),
        ("Grandpa", "👴"),
        ("Student", "🧑‍🎓"),
        ("Alex", DEFAULT_AVATAR),
    ],
)
def test_avatar_for_name(name: str, avatar: str) -> None:
    assert avatar_for_name(name) == avatar


def test_first_match_wins() -> None:
    # "grandmother" contains "mother", which is checked first.
    assert avatar_for_name("Grandmother") == PARENT_AVATAR
    # "Mason" contains "son".
    assert avatar_for_name("Mason") == "👦"


def test_upsert_preserves_created_at() -> None:
    clock = _Clock()
    registry = ProfileRegistry(clock=clock)

    first = registry.upsert("web-guest-1", "Mom")
    clock.advance(60)
    second = registry.upsert("web-guest-1", "Dad")

    assert second.created_at == first.created_at
    assert second.last_seen == clock.now
    assert second.name == "Dad"
    assert second.avatar == "👨"
    assert len(registry) == 1


def test_touch_refreshes_last_seen_only_for_known_profiles() -> None:
    clock = _Clock()
    registry = ProfileRegistry(clock=clock)
    assert registry.touch("nobody") is None
    assert "nobody" not in registry

    registry.upsert("web-guest-1", "Mom")
    clock.advance(30)
    touched = registry.touch("web-guest-1")

    assert touched is not None
    assert touched.last_seen == clock.now
    assert touched.name == "Mom"
