"""Domain service: turn a checkout outcome into a storable OrderRecord.

Pure and side-effect free apart from reading the clock. Line items and
the address are encoded as JSON text; reading them back is offered for
callers that want the structured form again.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from datetime import datetime

from order_history.domain.exceptions import EncodingError, ValidationError
from order_history.domain.model.order import OrderItem, OrderRecord, utc_now
from order_history.domain.model.value_objects import Address, Money

ZERO_AMOUNT = "0.00"


def money_to_string(amount: Money | None) -> str:
    """``units + nanos/1e9`` with exactly two decimals; absent -> "0.00"."""
    if amount is None:
        return ZERO_AMOUNT
    return amount.to_decimal_string()


def build_record(
    order_id: str,
    user_id: str,
    email: str,
    total_cost: Money | None,
    line_items: Sequence[OrderItem],
    address: Address,
    *,
    clock: Callable[[], datetime] = utc_now,
    default_currency: str = "USD",
) -> OrderRecord:
    """Assemble the record for a completed checkout.

    Raises EncodingError if the items or the address cannot be encoded;
    nothing is returned in that case.
    """
    items_blob = encode_items(line_items)
    address_blob = encode_address(address)

    return OrderRecord(
        id=order_id,
        user_id=user_id,
        email=email,
        total_cost=money_to_string(total_cost),
        currency=total_cost.currency_code if total_cost is not None else default_currency,
        items=items_blob,
        shipping_address=address_blob,
        created_at=clock(),
    )


# --- Encoding -----------------------------------------------------------------


def encode_items(line_items: Sequence[OrderItem]) -> str:
    return _dumps([_item_to_raw(item) for item in line_items], "line items")


def encode_address(address: Address) -> str:
    return _dumps(_address_to_raw(address), "shipping address")


def _item_to_raw(item: OrderItem) -> dict:
    return {
        "item": {
            "product_id": item.product_id,
            "quantity": item.quantity,
        },
        "cost": {
            "currency_code": item.cost.currency_code,
            "units": item.cost.units,
            "nanos": item.cost.nanos,
        },
    }


def _address_to_raw(address: Address) -> dict:
    return {
        "street_address": address.street_address,
        "city": address.city,
        "state": address.state,
        "country": address.country,
        "zip_code": address.zip_code,
    }


def _dumps(raw: object, what: str) -> str:
    try:
        return json.dumps(raw, allow_nan=False, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Cannot encode {what}: {exc}") from exc


# --- Decoding -----------------------------------------------------------------


def decode_items(blob: str) -> list[OrderItem]:
    try:
        return [
            OrderItem(
                product_id=raw["item"]["product_id"],
                quantity=raw["item"]["quantity"],
                cost=Money(
                    units=raw["cost"].get("units", 0),
                    nanos=raw["cost"].get("nanos", 0),
                    currency_code=raw["cost"]["currency_code"],
                ),
            )
            for raw in json.loads(blob)
        ]
    except (ValueError, TypeError, KeyError, AttributeError, ValidationError) as exc:
        raise EncodingError(f"Cannot decode line items: {exc}") from exc


def decode_address(blob: str) -> Address:
    try:
        raw = json.loads(blob)
        return Address(
            street_address=raw["street_address"],
            city=raw["city"],
            state=raw["state"],
            country=raw["country"],
            zip_code=raw["zip_code"],
        )
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
        raise EncodingError(f"Cannot decode shipping address: {exc}") from exc
