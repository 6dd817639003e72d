"""Service configuration for hubstate."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from hubstate._constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_PORT,
    HISTORY_CAPACITY,
    HISTORY_SNAPSHOT_SIZE,
    VOICE_HANDLE_PREFIX,
    VOICE_ID_PREFIX,
)
from hubstate.exceptions import HubConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(env: Mapping[str, str], key: str) -> int | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise HubConfigError(f"{key} must be an integer, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class HubConfig:
    """Engine and server configuration.

    Parameters
    ----------
    host : str
        Interface the HTTP server binds to.
    port : int
        TCP port the HTTP server listens on.
    history_capacity : int
        Maximum number of voice history entries kept per visitor. Older
        entries are evicted first.
    history_snapshot_size : int
        Number of most recent entries mirrored into ``HubState.voice_history``.
    default_history_limit : int
        Page size used when a history query does not specify ``limit``.
    voice_id_prefix : str
        External identifier prefix that marks a voice-platform caller.
    voice_handle_prefix : str
        Prefix of the sequential handles allocated to voice callers.
    cors_enabled : bool
        Attach permissive CORS headers to every HTTP response.
    log_level : str
        Root log level used by the ``python -m hubstate`` entrypoint.
    """

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    history_capacity: int = HISTORY_CAPACITY
    history_snapshot_size: int = HISTORY_SNAPSHOT_SIZE
    default_history_limit: int = DEFAULT_HISTORY_LIMIT
    voice_id_prefix: str = VOICE_ID_PREFIX
    voice_handle_prefix: str = VOICE_HANDLE_PREFIX
    cors_enabled: bool = True
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for name in ("history_capacity", "history_snapshot_size", "default_history_limit"):
            value = getattr(self, name)
            if value <= 0:
                raise HubConfigError(f"{name} must be positive, got {value}")
        if not self.voice_id_prefix:
            raise HubConfigError("voice_id_prefix must be non-empty")
        if not self.voice_handle_prefix:
            raise HubConfigError("voice_handle_prefix must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> HubConfig:
        """Create configuration from environment variables.

        Reads optional ``HUB_*`` variables (and ``PORT`` as a fallback for
        the listen port). Explicit keyword arguments override environment
        values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        HubConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "HUB_HOST": "host",
            "HUB_VOICE_ID_PREFIX": "voice_id_prefix",
            "HUB_VOICE_HANDLE_PREFIX": "voice_handle_prefix",
            "HUB_LOG_LEVEL": "log_level",
        }
        _ENV_INT_MAP = {
            "HUB_HISTORY_CAPACITY": "history_capacity",
            "HUB_HISTORY_SNAPSHOT_SIZE": "history_snapshot_size",
            "HUB_DEFAULT_HISTORY_LIMIT": "default_history_limit",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, field_name in _ENV_INT_MAP.items():
            parsed = _env_int(env, env_key)
            if parsed is not None:
                config_kwargs[field_name] = parsed

        # HUB_PORT wins over the generic PORT used by most hosting platforms.
        port = _env_int(env, "HUB_PORT")
        if port is None:
            port = _env_int(env, "PORT")
        if port is not None:
            config_kwargs["port"] = port

        if "cors_enabled" not in overrides:
            config_kwargs["cors_enabled"] = _env_bool(env.get("HUB_CORS_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
