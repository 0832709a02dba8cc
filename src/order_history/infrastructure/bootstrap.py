"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
The repository it returns is meant to be built once at startup and handed
to every handler that needs it.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from order_history.domain.exceptions import StoreConnectionError
from order_history.infrastructure.config import Settings, get_settings
from order_history.infrastructure.persistence.sql_order_repository import (
    SqlOrderRepository,
)


def engine_options(settings: Settings) -> dict[str, Any]:
    """Pool and connect options suitable for the configured database."""
    try:
        url = make_url(settings.database_url)
    except ArgumentError as exc:
        raise StoreConnectionError(f"Invalid database URL: {exc}") from exc
    if url.get_backend_name() == "sqlite":
        return {}
    options: dict[str, Any] = {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_recycle": 1800,
    }
    if url.get_backend_name() == "postgresql":
        options["connect_args"] = {
            "connect_timeout": settings.database_connect_timeout_seconds,
        }
    return options


def order_repository(settings: Settings | None = None) -> SqlOrderRepository:
    settings = settings or get_settings()
    return SqlOrderRepository(
        settings.database_url,
        statement_timeout=settings.statement_timeout_seconds,
        **engine_options(settings),
    )
