"""Base model for hub documents.

Every hub model inherits from :class:`HubBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys the web frontend and
  the voice runtime send map automatically to snake_case fields.
* ``populate_by_name`` so Python callers may use either spelling.
* :meth:`HubBaseModel.to_wire` / :meth:`HubBaseModel.to_document` for the
  JSON and merge-ready dict forms.

Documents that clients are allowed to extend (the hub state and its nested
records) subclass :class:`HubDocument`, which keeps unknown keys instead of
dropping them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HubBaseModel(BaseModel):
    """Base for hub models with a camelCase wire form."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-compatible dict keyed by wire (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True)

    def to_document(self) -> dict[str, Any]:
        """Python-typed dict keyed by wire names, suitable for merging."""
        return self.model_dump(by_alias=True)


class HubDocument(HubBaseModel):
    """Hub model that preserves client-supplied keys it does not declare."""

    model_config = ConfigDict(extra="allow")
