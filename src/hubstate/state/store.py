"""In-memory hub state store.

The store owns every visitor's :class:`HubState`. Documents live for the
lifetime of the process; there is no delete, only :meth:`StateStore.reset`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import UTC, datetime

from hubstate._constants import VOICE_HANDLE_PREFIX
from hubstate.models.state import HubState

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StateStore:
    """Per-visitor document store.

    Reads hand out deep copies so callers can never alter the stored
    document behind the store's back; writes replace the document wholesale.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        voice_handle_prefix: str = VOICE_HANDLE_PREFIX,
    ) -> None:
        self._clock = clock
        self._voice_handle_prefix = voice_handle_prefix
        self._states: dict[str, HubState] = {}

    def _default(self, handle: str) -> HubState:
        return HubState.default(
            handle,
            now=self._clock(),
            is_voice_user=handle.startswith(self._voice_handle_prefix),
        )

    def get(self, handle: str) -> HubState | None:
        """Current document for *handle*, or ``None`` without creating one."""
        state = self._states.get(handle)
        if state is None:
            return None
        return state.model_copy(deep=True)

    def get_or_create(self, handle: str) -> HubState:
        state = self._states.get(handle)
        if state is None:
            state = self._default(handle)
            self._states[handle] = state
            _logger.info("Created new hub state for visitor: %s", handle)
        return state.model_copy(deep=True)

    def put(self, handle: str, state: HubState) -> None:
        self._states[handle] = state.model_copy(deep=True)

    def reset(self, handle: str) -> HubState:
        """Discard custom data for *handle* and reinstate the default document."""
        state = self._default(handle)
        self._states[handle] = state
        return state.model_copy(deep=True)

    def visitor_ids(self) -> list[str]:
        return list(self._states)

    def items(self) -> Iterator[tuple[str, HubState]]:
        """Iterate over a snapshot of ``(handle, state)`` pairs."""
        for handle in list(self._states):
            yield handle, self._states[handle].model_copy(deep=True)

    def __contains__(self, handle: object) -> bool:
        return handle in self._states

    def __len__(self) -> int:
        return len(self._states)
