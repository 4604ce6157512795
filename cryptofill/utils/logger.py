"""
Logging configuration and utilities for the fulfillment engine.

Provides structured logging with JSON format for production environments
and human-readable format for development.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from decimal import Decimal
from uuid import UUID


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Converts log records to JSON format with additional context fields.
    """

    EXTRA_FIELDS = ("order_id", "exchange_id", "side", "reason", "request_id")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add extra fields if present
        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = str(getattr(record, name))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class FulfillmentLogger:
    """
    Centralized logger for the fulfillment engine.

    This is the sink the engine reports to. Anything exposing the same
    ``log_*`` methods can be injected in its place (tests use a mock).
    """

    CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

    def __init__(
        self,
        name: str = "Fulfillment",
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        use_json: bool = False,
    ):
        """
        Initialize the fulfillment logger.

        Args:
            name: Logger name
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (None for console only)
            use_json: Use JSON formatting (for production)
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(self._create_formatter(use_json))
        self.logger.addHandler(console_handler)

        if log_dir:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            self.logger.addHandler(
                self._create_file_handler(log_dir / "application.log", use_json)
            )

            self.fill_logger = logging.getLogger(f"{name}.fills")
            self.fill_logger.setLevel(logging.INFO)
            self.fill_logger.handlers.clear()
            self.fill_logger.addHandler(
                self._create_file_handler(log_dir / "fills.log", use_json)
            )

            error_handler = self._create_file_handler(log_dir / "errors.log", use_json)
            error_handler.setLevel(logging.ERROR)
            self.logger.addHandler(error_handler)
        else:
            self.fill_logger = self.logger

    def _create_formatter(self, use_json: bool) -> logging.Formatter:
        if use_json:
            return JSONFormatter()
        return logging.Formatter(self.CONSOLE_FORMAT, datefmt=self.DATE_FORMAT)

    def _create_file_handler(self, filepath: Path, use_json: bool) -> logging.FileHandler:
        """Create a file handler with appropriate formatter."""
        handler = logging.FileHandler(filepath)
        handler.setFormatter(self._create_formatter(use_json))
        return handler

    def log_order_received(
        self,
        order_id: UUID,
        side: str,
        quantity: Decimal,
        price: Decimal,
        candidate_count: int,
    ):
        """Log the start of a match."""
        extra = {"order_id": order_id, "side": side}
        msg = (
            f"Order received: {side} {quantity} @ {price} "
            f"({candidate_count} candidate orders)"
        )
        self.logger.info(msg, extra=extra)

    def log_fill(
        self,
        order_id: UUID,
        exchange_id: str,
        quantity: Decimal,
        cost: Decimal,
        price: Decimal,
    ):
        """Log a fill line added to a transaction."""
        extra = {"order_id": order_id, "exchange_id": exchange_id}
        msg = f"Fill added: {quantity} for {cost} (price {price}), exchange: {exchange_id}"
        self.fill_logger.info(msg, extra=extra)

    def log_exchange_exhausted(self, order_id: UUID, exchange_id: str, reason: str):
        """Log a candidate skipped because an exchange ran out of crypto or funds."""
        extra = {"order_id": order_id, "exchange_id": exchange_id, "reason": reason}
        if reason == "crypto":
            msg = f"Exchange {exchange_id}: no more crypto to use"
        else:
            msg = f"Exchange {exchange_id}: no more funds to use"
        self.logger.info(msg, extra=extra)

    def log_order_complete(self, order_id: UUID):
        """Log that the requested quantity has been reached."""
        self.logger.info(f"Order {order_id} fully filled", extra={"order_id": order_id})

    def log_transaction_summary(
        self,
        order_id: UUID,
        filled_quantity: Decimal,
        total_cost: Decimal,
        unfulfilled_quantity: Decimal,
        fill_count: int,
    ):
        """Log the final result of a match."""
        msg = (
            f"Transaction {order_id}: filled {filled_quantity} for {total_cost}, "
            f"unfulfilled {unfulfilled_quantity}, {fill_count} fills"
        )
        self.logger.info(msg, extra={"order_id": order_id})

    def log_error(
        self,
        message: str,
        exception: Optional[Exception] = None,
        **kwargs
    ):
        """Log error with optional exception."""
        if exception:
            self.logger.error(message, exc_info=exception, extra=kwargs)
        else:
            self.logger.error(message, extra=kwargs)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(message, extra=kwargs)


# Global logger instance
_logger: Optional[FulfillmentLogger] = None


def get_logger(
    name: str = "Fulfillment",
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    use_json: bool = False,
) -> FulfillmentLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        log_level: Logging level
        log_dir: Directory for log files
        use_json: Use JSON formatting

    Returns:
        FulfillmentLogger instance
    """
    global _logger

    if _logger is None:
        _logger = FulfillmentLogger(name, log_level, log_dir, use_json)

    return _logger
