"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any other caller) and the
application layer without exposing storage details to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from order_history.domain.model.order import OrderItem
from order_history.domain.model.value_objects import Address, Money


@dataclass(frozen=True)
class CheckoutOutcome:
    """Input: everything the checkout workflow knows once an order went through."""

    order_id: str
    user_id: str
    email: str
    total_cost: Money | None
    items: list[OrderItem]
    address: Address


@dataclass(frozen=True)
class OrderRecordDTO:
    """Output: a stored order with its encoded fields left as-is."""

    id: str
    user_id: str
    email: str
    total_cost: str
    currency: str
    items: str
    shipping_address: str
    created_at: str


@dataclass(frozen=True)
class OrderLineDTO:
    """Output: a single decoded line item as displayed to the user."""

    product_id: str
    quantity: int
    unit_cost: str  # formatted, e.g. "15.00 USD"


@dataclass(frozen=True)
class OrderHistoryDTO:
    """Output: one entry of a user's order history, decoded."""

    id: str
    email: str
    total_cost: str
    currency: str
    items: list[OrderLineDTO]
    shipping_address: Address
    created_at: str
