"""Abstract repository for persisted order records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from order_history.domain.model.order import OrderRecord


class OrderRepository(ABC):

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create the backing storage if missing. Safe to call repeatedly."""

    @abstractmethod
    def save(self, record: OrderRecord, *, timeout: float | None = None) -> None:
        """Insert a new record. Never overwrites an existing id."""

    @abstractmethod
    def list_by_user(
        self, user_id: str, *, timeout: float | None = None
    ) -> list[OrderRecord]:
        """Return every record for *user_id*, most recent first."""
