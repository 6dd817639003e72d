"""Cross-visitor grocery aggregation models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from hubstate.models._base import HubBaseModel


class GroceryItem(HubBaseModel):
    """A grocery list item annotated with its owner."""

    id: str
    item: Any
    visitor_id: str
    user_name: str
    is_pending: bool = False
    added_at: datetime


class GroceryAggregate(HubBaseModel):
    items: list[GroceryItem] = Field(default_factory=list)
    total_items: int = 0
    user_count: int = 0


class GroceryClearResult(HubBaseModel):
    total_cleared: int = 0
    users_affected: list[str] = Field(default_factory=list)
