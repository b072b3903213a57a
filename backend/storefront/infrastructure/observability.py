"""Structured Logging — JSON formatter and setup for the storefront process.

Invariants:
    - Every record carries timestamp, level, logger, message and the shop name
      (two shops can share one log sink)
    - Domain extras (error_code, resource, order_id, user_key, path, attempts)
      surfaced only when present
    - setup_logging is idempotent: calling it twice never duplicates output

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - Text format keeps the extras as trailing key=value pairs so dev logs still
      show which resource failed
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_FIELDS: tuple[str, ...] = (
    "error_code", "resource", "order_id", "user_key", "path", "attempts",
)


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


class ShopNameFilter(logging.Filter):
    """Stamp each record with the shop it came from."""

    def __init__(self, shop_name: str):
        super().__init__()
        self.shop_name = shop_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.shop = self.shop_name
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "shop": getattr(record, "shop", None),
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO", fmt: str = "json", shop_name: str = "Storefront") -> logging.Handler:
    """Install (or replace) the storefront root handler."""
    global _handler
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    handler.addFilter(ShopNameFilter(shop_name))
    if _handler is not None:
        logging.root.removeHandler(_handler)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _handler = handler
    return handler
