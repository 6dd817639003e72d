"""External identifier to visitor handle resolution."""

from __future__ import annotations

import logging

from hubstate._constants import VOICE_HANDLE_PREFIX, VOICE_ID_PREFIX
from hubstate._redact import mask_voice_id

_logger = logging.getLogger(__name__)


class IdentityResolver:
    """Map caller identifiers to stable visitor handles.

    Web callers already use short ids and pass through unchanged. Voice
    callers (ids starting with ``voice_id_prefix``) get a sequential handle
    such as ``alexa-user-3`` on first sight; the counter starts at 1 and is
    never reused for the lifetime of the resolver.
    """

    def __init__(
        self,
        *,
        voice_id_prefix: str = VOICE_ID_PREFIX,
        handle_prefix: str = VOICE_HANDLE_PREFIX,
    ) -> None:
        self._voice_id_prefix = voice_id_prefix
        self._handle_prefix = handle_prefix
        self._counter = 0
        self._handles: dict[str, str] = {}

    def is_voice_caller(self, external_id: str) -> bool:
        return external_id.startswith(self._voice_id_prefix)

    def is_voice_handle(self, handle: str) -> bool:
        return handle.startswith(self._handle_prefix)

    def resolve(self, external_id: str) -> str:
        """Return the visitor handle for *external_id*, allocating one if needed."""
        if not self.is_voice_caller(external_id):
            return external_id

        handle = self._handles.get(external_id)
        if handle is None:
            self._counter += 1
            handle = f"{self._handle_prefix}{self._counter}"
            self._handles[external_id] = handle
            _logger.info(
                "Allocated visitor %s for voice caller %s",
                handle,
                mask_voice_id(external_id, prefix=self._voice_id_prefix),
            )
        return handle

    def mappings(self) -> dict[str, str]:
        """Copy of the voice id -> handle map."""
        return dict(self._handles)

    def __len__(self) -> int:
        return len(self._handles)
