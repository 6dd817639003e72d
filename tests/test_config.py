from __future__ import annotations

import pytest

from hubstate.config import HubConfig
from hubstate.exceptions import HubConfigError


def test_defaults() -> None:
    config = HubConfig()
    assert config.port == 3001
    assert config.history_capacity == 100
    assert config.history_snapshot_size == 10
    assert config.voice_id_prefix == "amzn1."


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("HUB_HISTORY_CAPACITY", "25")
    monkeypatch.setenv("HUB_CORS_ENABLED", "off")
    monkeypatch.setenv("HUB_LOG_LEVEL", "debug")

    config = HubConfig.from_env()

    assert config.port == 8080
    assert config.history_capacity == 25
    assert config.cors_enabled is False
    assert config.log_level == "debug"


def test_hub_port_beats_port_and_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("HUB_PORT", "9090")
    assert HubConfig.from_env().port == 9090
    assert HubConfig.from_env(port=1234).port == 1234


def test_invalid_values(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(HubConfigError):
        HubConfig(history_capacity=0)

    monkeypatch.setenv("HUB_HISTORY_CAPACITY", "lots")
    with pytest.raises(HubConfigError):
        HubConfig.from_env()
