"""SQLAlchemy-backed implementation of OrderRepository.

One engine (connection pool) per repository, shared by every call. Each
call checks a connection out, runs in its own transaction and hands the
connection back, so concurrent callers on different threads never wait
on each other in-process.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    insert,
    select,
    text,
)
from sqlalchemy.engine import Connection, RowMapping
from sqlalchemy.exc import (
    ArgumentError,
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.schema import CreateIndex, CreateTable

from order_history.domain.exceptions import (
    DuplicateKeyError,
    InvalidRecordError,
    SchemaError,
    StoreConnectionError,
    StoreError,
    StoreUnavailableError,
)
from order_history.domain.model.order import OrderRecord
from order_history.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

metadata = MetaData()

orders_table = Table(
    "orders",
    metadata,
    Column("id", String(255), primary_key=True),
    Column("user_id", String(255), nullable=False),
    Column("email", String(255), nullable=False),
    Column("total_cost", String(50), nullable=False),
    Column("currency", String(10), nullable=False),
    Column("items", Text, nullable=False),
    Column("shipping_address", Text, nullable=False),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
)

orders_user_index = Index("ix_orders_user_id", orders_table.c.user_id)


class SqlOrderRepository(OrderRepository):
    """Order store on any SQLAlchemy-supported database (PostgreSQL in production).

    Construction opens the pool, probes the database and bootstraps the
    schema. If any of that fails the constructor raises and no repository
    exists, so a half-initialised store can never be used.
    """

    def __init__(
        self,
        database_url: str,
        *,
        statement_timeout: float | None = None,
        **engine_options: Any,
    ) -> None:
        self._statement_timeout = statement_timeout
        try:
            self._engine = create_engine(
                database_url, pool_pre_ping=True, **engine_options
            )
        except (ArgumentError, ImportError) as exc:
            raise StoreConnectionError(f"Cannot open database: {exc}") from exc

        try:
            self._ping()
            self.ensure_schema()
        except StoreError:
            self._engine.dispose()
            raise

    # --- OrderRepository interface --------------------------------------------

    def ensure_schema(self) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(CreateTable(orders_table, if_not_exists=True))
                conn.execute(CreateIndex(orders_user_index, if_not_exists=True))
        except SQLAlchemyError as exc:
            logger.error("Schema bootstrap failed: %s", exc)
            raise SchemaError(f"Cannot create orders table: {exc}") from exc
        logger.info("Orders schema ready on %s", self._engine.url.render_as_string())

    def save(self, record: OrderRecord, *, timeout: float | None = None) -> None:
        missing = record.first_missing_field()
        if missing is not None:
            raise InvalidRecordError(missing)

        try:
            with self._engine.begin() as conn:
                self._apply_timeout(conn, timeout)
                conn.execute(insert(orders_table).values(**self._to_row(record)))
        except IntegrityError as exc:
            logger.warning(
                "Duplicate order id %s",
                record.id,
                extra={"order_id": record.id, "error_code": "DUPLICATE_KEY"},
            )
            raise DuplicateKeyError(record.id) from exc
        except SQLAlchemyError as exc:
            raise self._translate(exc, "insert") from exc

        logger.debug(
            "Inserted order %s for user %s",
            record.id,
            record.user_id,
            extra={"order_id": record.id, "user_id": record.user_id},
        )

    def list_by_user(
        self, user_id: str, *, timeout: float | None = None
    ) -> list[OrderRecord]:
        stmt = (
            select(orders_table)
            .where(orders_table.c.user_id == user_id)
            .order_by(orders_table.c.created_at.desc())
        )
        try:
            with self._engine.begin() as conn:
                self._apply_timeout(conn, timeout)
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            raise self._translate(exc, "select") from exc

        return [self._to_domain(row) for row in rows]

    def dispose(self) -> None:
        """Close every pooled connection."""
        self._engine.dispose()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(record: OrderRecord) -> dict:
        row = {
            "id": record.id,
            "user_id": record.user_id,
            "email": record.email,
            "total_cost": record.total_cost,
            "currency": record.currency,
            "items": record.items,
            "shipping_address": record.shipping_address,
        }
        if record.created_at is not None:
            row["created_at"] = _as_utc(record.created_at)
        return row

    @staticmethod
    def _to_domain(row: RowMapping) -> OrderRecord:
        return OrderRecord(
            id=row["id"],
            user_id=row["user_id"],
            email=row["email"],
            total_cost=row["total_cost"],
            currency=row["currency"],
            items=row["items"],
            shipping_address=row["shipping_address"],
            created_at=_as_utc(row["created_at"]),
        )

    # --- Connection helpers ---------------------------------------------------

    def _ping(self) -> None:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Database liveness probe failed: %s", exc)
            raise StoreConnectionError(f"Cannot reach database: {exc}") from exc

    def _apply_timeout(self, conn: Connection, timeout: float | None) -> None:
        if timeout is None:
            timeout = self._statement_timeout
        if timeout is None:
            return
        if conn.dialect.name == "postgresql":
            millis = max(1, int(timeout * 1000))
            conn.execute(text(f"SET LOCAL statement_timeout = {millis}"))
        else:
            logger.debug("Statement timeout not supported on %s", conn.dialect.name)

    @staticmethod
    def _translate(exc: SQLAlchemyError, operation: str) -> StoreError:
        if isinstance(exc, (OperationalError, InterfaceError)) or (
            isinstance(exc, DBAPIError) and exc.connection_invalidated
        ):
            logger.error(
                "Order store unavailable during %s: %s",
                operation,
                exc,
                extra={"error_code": "UNAVAILABLE"},
            )
            return StoreUnavailableError(f"Database {operation} failed: {exc}")
        logger.error(
            "Order store %s failed: %s",
            operation,
            exc,
            extra={"error_code": "INTERNAL"},
        )
        return StoreError(f"Database {operation} failed: {exc}")


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes (e.g. from SQLite) are stored and read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
