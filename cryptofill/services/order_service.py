"""
Order Service - Business logic layer for order fulfillment.

Validates incoming order parameters, takes a snapshot of the registered
exchanges and runs the fulfillment engine against it.
"""

import logging
import threading
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Union
from uuid import UUID, uuid4

from cryptofill.config import Settings, get_settings
from cryptofill.core.fulfillment_engine import FulfillmentEngine
from cryptofill.core.order import IncomingOrder, OrderSide
from cryptofill.core.transaction import Transaction
from cryptofill.services.exchange_registry import ExchangeRegistry
from cryptofill.utils.exceptions import (
    InvalidOrderException,
    ValidationException,
)
from cryptofill.utils.validators import validate_order_parameters

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service class for handling order fulfillment.

    Provides the layer between the front-ends (API, console) and the
    fulfillment engine: validation, snapshotting and statistics.
    """

    def __init__(
        self,
        registry: ExchangeRegistry,
        engine: Optional[FulfillmentEngine] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize order service.

        Args:
            registry: Source of exchange snapshots
            engine: Fulfillment engine (a default one is created if omitted)
            settings: Order limits (global settings if omitted)
        """
        self.registry = registry
        self.engine = engine or FulfillmentEngine()
        self.settings = settings or get_settings()
        self.statistics: Dict[str, int] = {
            "orders_processed": 0,
            "orders_filled": 0,
            "orders_partial": 0,
            "orders_unfilled": 0,
            "fills_generated": 0,
        }
        self._stats_lock = threading.Lock()
        self.logger = logging.getLogger(f"{__name__}.OrderService")
        self.logger.info("OrderService initialized")

    def submit_order(
        self,
        side: Union[str, OrderSide],
        quantity: Union[str, Decimal],
        price: Union[str, Decimal],
        order_id: Optional[UUID] = None,
        exchange_ids: Optional[Iterable[str]] = None,
    ) -> Transaction:
        """
        Fulfill an order against the current exchange snapshots.

        Args:
            side: Order side (buy or sell)
            quantity: Requested quantity
            price: Limit price
            order_id: Order identifier (generated if omitted)
            exchange_ids: Only use these exchanges (all if omitted)

        Returns:
            Transaction with the fills

        Raises:
            InvalidOrderSideException: If side is neither buy nor sell
            ValidationException: If quantity or price are invalid
            ExchangeNotFoundException: If an exchange id is unknown
        """
        validated_side, validated_quantity, validated_price = self._validate(side, quantity, price)

        order = IncomingOrder(
            side=validated_side,
            quantity=validated_quantity,
            price=validated_price,
            order_id=order_id or uuid4(),
        )

        exchanges = self.registry.get_exchanges(exchange_ids)
        self.logger.info(
            f"Submitting order {order.order_id}: {order.side.value} "
            f"{order.quantity} @ {order.price} across {len(exchanges)} exchanges"
        )

        transaction = self.engine.create_transaction(exchanges, order)
        self._record(transaction)

        self.logger.info(
            f"Order {order.order_id} processed. "
            f"Filled: {transaction.filled_quantity}/{transaction.requested_quantity}, "
            f"Cost: {transaction.total_cost}, Fills: {len(transaction.fills)}"
        )
        return transaction

    def get_statistics(self) -> Dict[str, Any]:
        """Get a copy of the service statistics."""
        with self._stats_lock:
            return self.statistics.copy()

    def _validate(self, side, quantity, price):
        try:
            return validate_order_parameters(
                side,
                quantity,
                price,
                min_quantity=self.settings.min_order_quantity,
                max_quantity=self.settings.max_order_quantity,
                min_price=self.settings.min_price,
                max_price=self.settings.max_price,
            )
        except InvalidOrderException as e:
            raise ValidationException(e.message, details=e.details) from e

    def _record(self, transaction: Transaction) -> None:
        with self._stats_lock:
            self.statistics["orders_processed"] += 1
            self.statistics["fills_generated"] += len(transaction.fills)
            if transaction.is_fully_filled:
                self.statistics["orders_filled"] += 1
            elif transaction.has_fills:
                self.statistics["orders_partial"] += 1
            else:
                self.statistics["orders_unfilled"] += 1
