"""Tests for the JSON log formatter."""

import json
import logging

from order_history.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "order_history.test", logging.WARNING, __file__, 1, "Order %s failed", ("o-1",), None
    )
    record.__dict__.update(extra)
    return record


class TestJSONFormatter:

    def test_core_fields(self):
        out = json.loads(JSONFormatter().format(_record()))
        assert out["level"] == "WARNING"
        assert out["logger"] == "order_history.test"
        assert out["message"] == "Order o-1 failed"
        assert "timestamp" in out

    def test_surfaces_order_extras(self):
        out = json.loads(JSONFormatter().format(
            _record(order_id="o-1", error_code="DUPLICATE_KEY")
        ))
        assert out["order_id"] == "o-1"
        assert out["error_code"] == "DUPLICATE_KEY"
        assert "user_id" not in out
