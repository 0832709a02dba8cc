"""Order record: the only entity this core persists.

An OrderRecord is the flat, storable form of a completed checkout. Line
items and the shipping address travel as opaque encoded text; the store
never looks inside them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from order_history.domain.model.value_objects import Money


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderItem:
    """One purchased product as handed over by the checkout workflow."""

    product_id: str
    quantity: int
    cost: Money  # unit cost at checkout time


@dataclass(frozen=True)
class OrderRecord:
    """A completed order, ready to be stored or just read back.

    Created exactly once per checkout; never updated or deleted here.
    """

    id: str
    user_id: str
    email: str
    total_cost: str  # canonical decimal text, e.g. "19.99"
    currency: str
    items: str  # encoded line items
    shipping_address: str  # encoded address
    created_at: datetime = field(default_factory=utc_now)

    REQUIRED_FIELDS = (
        "id",
        "user_id",
        "email",
        "total_cost",
        "currency",
        "items",
        "shipping_address",
    )

    def first_missing_field(self) -> str | None:
        """Name of the first required field that is empty, if any."""
        for name in self.REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                return name
        return None
