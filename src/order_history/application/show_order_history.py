"""Application service: Show Order History use case (query)."""

from __future__ import annotations

from order_history.application.dto import OrderHistoryDTO, OrderLineDTO
from order_history.domain.model.order import OrderRecord
from order_history.domain.repository.order_repository import OrderRepository
from order_history.domain.service.record_codec import decode_address, decode_items


class ShowOrderHistoryHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self, user_id: str, *, timeout: float | None = None
    ) -> list[OrderHistoryDTO]:
        """Return the user's orders, newest first. Empty list if none."""
        records = self._order_repo.list_by_user(user_id, timeout=timeout)
        return [self._to_dto(record) for record in records]

    @staticmethod
    def _to_dto(record: OrderRecord) -> OrderHistoryDTO:
        return OrderHistoryDTO(
            id=record.id,
            email=record.email,
            total_cost=record.total_cost,
            currency=record.currency,
            items=[
                OrderLineDTO(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_cost=str(item.cost),
                )
                for item in decode_items(record.items)
            ],
            shipping_address=decode_address(record.shipping_address),
            created_at=record.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )
