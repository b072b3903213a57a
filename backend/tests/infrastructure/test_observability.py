"""Structured logging tests — JSON/text formatting and idempotent setup."""

import json
import logging

from storefront.infrastructure.observability import (
    JSONFormatter, ShopNameFilter, TextFormatter, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "storefront.test", logging.WARNING, __file__, 1, "Order %s admitted", (1234,), None,
    )
    record.__dict__.update(extra)
    ShopNameFilter("Shop A").filter(record)
    return record


def test_json_formatter_includes_shop_and_extras():
    line = JSONFormatter().format(_record(error_code="SAVE_FAILED", resource="users"))
    log = json.loads(line)
    assert log["message"] == "Order 1234 admitted"
    assert log["shop"] == "Shop A"
    assert log["error_code"] == "SAVE_FAILED"
    assert log["resource"] == "users"
    assert "order_id" not in log


def test_text_formatter_appends_extras():
    line = TextFormatter().format(_record(order_id=1234))
    assert line.endswith("Order 1234 admitted order_id=1234")


def test_setup_logging_is_idempotent():
    before = len(logging.root.handlers)
    level = logging.root.level
    first = setup_logging("INFO", "json")
    second = setup_logging("DEBUG", "text")
    try:
        assert first not in logging.root.handlers
        assert second in logging.root.handlers
        assert len(logging.root.handlers) == before + 1
        assert logging.root.level == logging.DEBUG
    finally:
        logging.root.removeHandler(second)
        logging.root.setLevel(level)
