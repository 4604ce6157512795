"""
Tests for the structured logger.
"""

import json
import logging
from decimal import Decimal
from uuid import uuid4

from cryptofill.utils.logger import FulfillmentLogger, JSONFormatter


class TestJSONFormatter:
    """JSON log line layout."""

    def test_includes_context_fields(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 10, "Fill added", None, None)
        record.exchange_id = "exchange-01"
        record.reason = "funds"

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Fill added"
        assert data["level"] == "INFO"
        assert data["exchange_id"] == "exchange-01"
        assert data["reason"] == "funds"
        assert "order_id" not in data


class TestFulfillmentLogger:
    """File handlers and engine events."""

    def test_fills_go_to_their_own_file(self, tmp_path):
        logger = FulfillmentLogger("test.fills", log_dir=tmp_path, use_json=True)
        order_id = uuid4()

        logger.log_fill(order_id, "exchange-01", Decimal("1"), Decimal("5"), Decimal("5"))
        logger.log_exchange_exhausted(order_id, "exchange-01", "crypto")

        fills = (tmp_path / "fills.log").read_text().splitlines()
        application = (tmp_path / "application.log").read_text()
        assert len(fills) == 1
        assert json.loads(fills[0])["order_id"] == str(order_id)
        assert "no more crypto" in application

    def test_errors_file(self, tmp_path):
        logger = FulfillmentLogger("test.errors", log_dir=tmp_path)

        logger.log_error("snapshot unreadable", exchange_id="exchange-02")
        logger.info("loaded")

        errors = (tmp_path / "errors.log").read_text()
        assert "snapshot unreadable" in errors
        assert "loaded" not in errors
