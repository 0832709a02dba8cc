"""End-to-end tests for the click CLI against a SQLite database."""

import logging

import pytest
from click.testing import CliRunner

from order_history.infrastructure.cli.main import cli
from order_history.infrastructure.config import get_settings
from order_history.infrastructure.persistence.sql_order_repository import (
    SqlOrderRepository,
)

ADDRESS = "1 Main St|Springfield|IL|US|62701"


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("ORDERS_DATABASE_URL", f"sqlite:///{tmp_path / 'orders.db'}")
    monkeypatch.setenv("ORDERS_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    yield CliRunner()
    get_settings.cache_clear()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_order_history", False):
            root.removeHandler(handler)


def _record(runner, order_id, user="user-1", total="19.99"):
    return runner.invoke(cli, [
        "order", "record",
        "--id", order_id,
        "--user", user,
        "--email", "alice@example.com",
        "--total", total,
        "--items", "OLJCESPC7Z:1:19.99",
        "--address", ADDRESS,
    ])


class TestDbInit:

    def test_init_twice(self, runner):
        assert runner.invoke(cli, ["db", "init"]).exit_code == 0
        result = runner.invoke(cli, ["db", "init"])
        assert result.exit_code == 0
        assert "schema is ready" in result.output


class TestOrderRecord:

    def test_records_order(self, runner):
        result = _record(runner, "order-1")
        assert result.exit_code == 0, result.output
        assert "Order order-1 recorded" in result.output
        assert "Total: 19.99 USD" in result.output

    def test_duplicate_id_is_an_error(self, runner):
        _record(runner, "order-1")
        result = _record(runner, "order-1")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_generates_id_when_omitted(self, runner):
        result = runner.invoke(cli, [
            "order", "record",
            "--user", "user-1",
            "--email", "alice@example.com",
            "--items", "SKU-1:2:5.00",
            "--address", ADDRESS,
        ])
        assert result.exit_code == 0, result.output
        assert "Total: 0.00 USD" in result.output

    def test_bad_item_format_rejected(self, runner):
        result = runner.invoke(cli, [
            "order", "record",
            "--user", "user-1",
            "--email", "alice@example.com",
            "--items", "SKU-1:2",
            "--address", ADDRESS,
        ])
        assert result.exit_code == 2
        assert "ProductId:Quantity:UnitCost" in result.output

    def test_bad_address_rejected(self, runner):
        result = runner.invoke(cli, [
            "order", "record",
            "--user", "user-1",
            "--email", "alice@example.com",
            "--items", "SKU-1:2:5.00",
            "--address", "somewhere",
        ])
        assert result.exit_code == 2
        assert "street|city|state|country|zip" in result.output


class TestOrderHistory:

    def test_empty_history(self, runner):
        result = runner.invoke(cli, ["order", "history", "--user", "nobody"])
        assert result.exit_code == 0
        assert "No orders for user nobody." in result.output

    def test_lists_recorded_orders(self, runner):
        _record(runner, "order-1")
        _record(runner, "order-2", total="5.50")
        result = runner.invoke(cli, ["order", "history", "--user", "user-1"])
        assert result.exit_code == 0, result.output
        assert "Order order-1" in result.output
        assert "Order order-2" in result.output
        assert "OLJCESPC7Z" in result.output
        assert "Springfield" in result.output


class TestConnectionLifecycle:

    @pytest.fixture
    def disposals(self, monkeypatch):
        calls = []
        original = SqlOrderRepository.dispose

        def counting_dispose(repo):
            calls.append(repo)
            original(repo)

        monkeypatch.setattr(SqlOrderRepository, "dispose", counting_dispose)
        return calls

    def test_record_releases_pool(self, runner, disposals):
        assert _record(runner, "order-1").exit_code == 0
        assert len(disposals) == 1

    def test_failed_record_still_releases_pool(self, runner, disposals):
        _record(runner, "order-1")
        result = _record(runner, "order-1")
        assert result.exit_code == 1
        assert len(disposals) == 2

    def test_history_releases_pool(self, runner, disposals):
        result = runner.invoke(cli, ["order", "history", "--user", "user-1"])
        assert result.exit_code == 0
        assert len(disposals) == 1
