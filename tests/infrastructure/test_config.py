"""Tests for environment-driven settings and the composition root."""

import pytest

from order_history.domain.exceptions import StoreConnectionError
from order_history.infrastructure.bootstrap import engine_options, order_repository
from order_history.infrastructure.config import Settings


class TestSettings:

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("ORDERS_DEFAULT_CURRENCY", "EUR")
        monkeypatch.setenv("ORDERS_STATEMENT_TIMEOUT_SECONDS", "2.5")
        settings = Settings(_env_file=None)
        assert settings.default_currency == "EUR"
        assert settings.statement_timeout_seconds == 2.5

    @pytest.mark.parametrize("url", [
        "postgres://u:p@db:5432/orders",
        "postgresql://u:p@db:5432/orders",
    ])
    def test_libpq_urls_get_psycopg2_driver(self, url):
        settings = Settings(_env_file=None, database_url=url)
        assert settings.database_url == "postgresql+psycopg2://u:p@db:5432/orders"

    def test_explicit_driver_left_alone(self):
        url = "sqlite:///orders.db"
        assert Settings(_env_file=None, database_url=url).database_url == url


class TestEngineOptions:

    def test_sqlite_gets_no_pool_options(self):
        settings = Settings(_env_file=None, database_url="sqlite:///orders.db")
        assert engine_options(settings) == {}

    def test_postgres_gets_pool_and_connect_timeout(self):
        settings = Settings(
            _env_file=None,
            database_url="postgres://u:p@db/orders",
            database_pool_size=7,
            database_connect_timeout_seconds=3,
        )
        options = engine_options(settings)
        assert options["pool_size"] == 7
        assert options["connect_args"] == {"connect_timeout": 3}

    def test_invalid_url_fails_fast(self):
        settings = Settings(_env_file=None, database_url="not a url")
        with pytest.raises(StoreConnectionError, match="Invalid database URL"):
            engine_options(settings)


class TestOrderRepository:

    def test_builds_ready_repository(self, tmp_path):
        settings = Settings(
            _env_file=None, database_url=f"sqlite:///{tmp_path / 'orders.db'}"
        )
        repo = order_repository(settings)
        try:
            assert repo.list_by_user("user-1") == []
        finally:
            repo.dispose()
