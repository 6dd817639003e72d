from __future__ import annotations

import pytest
from pydantic import ValidationError

from hubstate.models.requests import (
    HistoryQuery,
    RegisterProfileRequest,
    ToggleHistoryRequest,
    UpdateStateRequest,
)


def test_update_state_request_accepts_camel_case() -> None:
    req = UpdateStateRequest.model_validate(
        {"userId": " web-guest-1 ", "state": {"lastAction": "HELP"}, "displayName": "  "}
    )
    assert req.user_id == "web-guest-1"
    assert req.state == {"lastAction": "HELP"}
    assert req.display_name is None


def test_blank_identifiers_are_rejected() -> None:
    with pytest.raises(ValidationError, match="userId is required"):
        UpdateStateRequest.model_validate({"userId": "   "})
    with pytest.raises(ValidationError, match="name is required"):
        RegisterProfileRequest.model_validate({"userId": "web-guest-1", "name": ""})


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ({}, True),
        ({"enabled": True}, True),
        ({"enabled": None}, True),
        ({"enabled": False}, False),
    ],
)
def test_toggle_only_explicit_false_disables(body: dict, expected: bool) -> None:
    assert ToggleHistoryRequest.model_validate(body).is_enabled is expected


def test_history_query_coerces_query_strings() -> None:
    query = HistoryQuery.model_validate({"limit": "5", "offset": "10"})
    assert (query.limit, query.offset) == (5, 10)
    with pytest.raises(ValidationError):
        HistoryQuery.model_validate({"offset": "-1"})
