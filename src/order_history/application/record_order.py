"""Application service: Record Order use case.

Called by the checkout workflow once an order has gone through. A
failure here is reported to the caller as a typed exception; whether the
checkout still counts as successful is the caller's decision.
"""

from __future__ import annotations

import logging

from order_history.application.dto import CheckoutOutcome, OrderRecordDTO
from order_history.domain.exceptions import StoreError
from order_history.domain.model.order import OrderRecord
from order_history.domain.repository.order_repository import OrderRepository
from order_history.domain.service.record_codec import build_record

logger = logging.getLogger(__name__)


class RecordOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        *,
        default_currency: str = "USD",
    ) -> None:
        self._order_repo = order_repo
        self._default_currency = default_currency

    def handle(
        self, outcome: CheckoutOutcome, *, timeout: float | None = None
    ) -> OrderRecordDTO:
        """Encode the checkout outcome and persist it.

        Steps:
        1. Build the record (EncodingError aborts before any write).
        2. Insert it; DuplicateKeyError / StoreUnavailableError propagate.
        3. Return a DTO of what was stored.
        """
        record = build_record(
            order_id=outcome.order_id,
            user_id=outcome.user_id,
            email=outcome.email,
            total_cost=outcome.total_cost,
            line_items=outcome.items,
            address=outcome.address,
            default_currency=self._default_currency,
        )

        try:
            self._order_repo.save(record, timeout=timeout)
        except StoreError as exc:
            logger.warning(
                "Order %s was not recorded: %s",
                record.id,
                exc,
                extra={"order_id": record.id, "error_code": exc.kind.value},
            )
            raise

        logger.info(
            "Recorded order %s",
            record.id,
            extra={"order_id": record.id, "user_id": record.user_id},
        )
        return self._to_dto(record)

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_dto(record: OrderRecord) -> OrderRecordDTO:
        return OrderRecordDTO(
            id=record.id,
            user_id=record.user_id,
            email=record.email,
            total_cost=record.total_cost,
            currency=record.currency,
            items=record.items,
            shipping_address=record.shipping_address,
            created_at=record.created_at.isoformat(),
        )
