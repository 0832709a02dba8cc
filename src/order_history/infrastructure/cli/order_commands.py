"""CLI commands for recording orders and reading order history."""

from __future__ import annotations

import uuid

import click

from order_history.application.dto import CheckoutOutcome, OrderHistoryDTO
from order_history.application.record_order import RecordOrderHandler
from order_history.application.show_order_history import ShowOrderHistoryHandler
from order_history.domain.exceptions import DomainException
from order_history.domain.model.order import OrderItem
from order_history.domain.model.value_objects import Address, Money
from order_history.infrastructure.bootstrap import order_repository
from order_history.infrastructure.config import get_settings


def _parse_items(raw: str, currency: str) -> list[OrderItem]:
    """Parse 'SKU-1:3:15.00,SKU-2:1:4.50' into OrderItem list."""
    items: list[OrderItem] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.split(":")
        if len(parts) != 3:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductId:Quantity:UnitCost'."
            )
        product_id, qty_str, cost_str = (p.strip() for p in parts)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        try:
            cost = Money.of(cost_str, currency)
        except DomainException as exc:
            raise click.BadParameter(str(exc))
        items.append(OrderItem(product_id=product_id, quantity=qty, cost=cost))
    return items


def _parse_address(raw: str) -> Address:
    """Parse 'street|city|state|country|zip' into an Address."""
    parts = [p.strip() for p in raw.split("|")]
    if len(parts) != 5:
        raise click.BadParameter(
            f"Invalid address '{raw}'. Expected 'street|city|state|country|zip'."
        )
    street, city, state, country, zip_code = parts
    return Address(
        street_address=street, city=city, state=state, country=country, zip_code=zip_code
    )


@click.command("record")
@click.option("--id", "order_id", default=None, help="Order ID (generated when omitted).")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option("--email", required=True, help="Customer email.")
@click.option("--total", default=None, help="Total cost, e.g. 19.99.")
@click.option("--currency", default=None, help="Currency code (defaults to settings).")
@click.option("--items", required=True, help="Items as 'ProductId:Qty:UnitCost,...'.")
@click.option("--address", required=True, help="Address as 'street|city|state|country|zip'.")
def order_record(
    order_id: str | None,
    user_id: str,
    email: str,
    total: str | None,
    currency: str | None,
    items: str,
    address: str,
) -> None:
    """Record a completed checkout."""
    settings = get_settings()
    currency = currency or settings.default_currency

    try:
        total_cost = Money.of(total, currency) if total is not None else None
    except DomainException as exc:
        raise click.BadParameter(str(exc), param_hint="--total")

    outcome = CheckoutOutcome(
        order_id=order_id or str(uuid.uuid4()),
        user_id=user_id,
        email=email,
        total_cost=total_cost,
        items=_parse_items(items, currency),
        address=_parse_address(address),
    )

    try:
        repo = order_repository(settings)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    try:
        handler = RecordOrderHandler(repo, default_currency=settings.default_currency)
        dto = handler.handle(outcome)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    finally:
        repo.dispose()

    click.echo(f"Order {dto.id} recorded  (user={dto.user_id})")
    click.echo(f"Total: {dto.total_cost} {dto.currency}")


def _display_order(dto: OrderHistoryDTO) -> None:
    """Shared formatting for one history entry."""
    click.echo(f"Order {dto.id}  ({dto.created_at})")
    click.echo(f"Email:    {dto.email}")
    addr = dto.shipping_address
    click.echo(
        f"Ship to:  {addr.street_address}, {addr.city}, {addr.state} "
        f"{addr.zip_code}, {addr.country}"
    )
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Unit cost':>16}")
    click.echo(f"  {'-'*43}")
    for item in dto.items:
        click.echo(f"  {item.product_id:<20} {item.quantity:>5} {item.unit_cost:>16}")
    click.echo(f"  {'-'*43}")
    click.echo(f"  {'Order Total':<26} {dto.total_cost + ' ' + dto.currency:>16}")


@click.command("history")
@click.option("--user", "user_id", required=True, help="User ID to list orders for.")
def order_history(user_id: str) -> None:
    """Show a user's orders, newest first."""
    try:
        repo = order_repository()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    try:
        dtos = ShowOrderHistoryHandler(repo).handle(user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    finally:
        repo.dispose()

    if not dtos:
        click.echo(f"No orders for user {user_id}.")
        return

    for i, dto in enumerate(dtos):
        if i:
            click.echo()
        _display_order(dto)
