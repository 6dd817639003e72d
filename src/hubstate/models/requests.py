"""Pydantic request models for the transport boundary.

These models provide a consistent "validate → normalize → execute" flow.
The HTTP layer parses bodies and query strings into them before calling
:class:`hubstate.engine.HubEngine`; the engine itself trusts its inputs.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class HubRequest(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )


class UserRequest(HubRequest):
    """Request naming the calling user."""

    user_id: str

    @field_validator("user_id")
    @classmethod
    def _user_id_non_empty(cls, value: str) -> str:
        user_id = value.strip()
        if not user_id:
            raise ValueError("userId is required")
        return user_id


class UpdateStateRequest(UserRequest):
    state: dict[str, Any] | None = None
    display_name: str | None = None

    @field_validator("display_name")
    @classmethod
    def _blank_name_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class RegisterProfileRequest(UserRequest):
    name: str

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("name is required")
        return name


class ResetStateRequest(UserRequest):
    pass


class ToggleHistoryRequest(HubRequest):
    enabled: bool | None = None
    clear_history: bool = False

    @property
    def is_enabled(self) -> bool:
        """Anything but an explicit ``false`` enables history."""
        return self.enabled is not False


class HistoryQuery(HubRequest):
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)


class AggregateHistoryQuery(HubRequest):
    limit: int | None = Field(default=None, ge=0)
