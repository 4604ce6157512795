"""
Order domain models

Defines the order side enum, the standing limit orders resting on an
exchange, and the incoming order that has to be fulfilled against them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Dict, Any, Union
from uuid import UUID, uuid4

from ..utils.exceptions import InvalidOrderSideException


class OrderSide(Enum):
    """Order side enumeration."""
    BUY = "BUY"
    SELL = "SELL"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "OrderSide"]) -> "OrderSide":
        """
        Parse a side from user input, case-insensitive.

        Raises:
            InvalidOrderSideException: If value is neither buy nor sell
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise InvalidOrderSideException(
                f"Unsupported order side: {value}",
                details={"side": value, "valid_sides": [s.value for s in cls]}
            )


@dataclass(frozen=True, slots=True)
class StandingOrder:
    """
    A limit order resting on an exchange (an ask or a bid).

    The side is implied by the list holding the order. Standing orders are
    never modified by a match; consumed amounts are reported on fill lines.

    Attributes:
        quantity: Original quantity of the order
        price: Limit price per unit
        order_id: Unique identifier for the order
        timestamp: When the order was placed, if known
        kind: Order kind as reported by the exchange (e.g. "Limit")
    """

    quantity: Decimal
    price: Decimal
    order_id: UUID = field(default_factory=uuid4)
    timestamp: Optional[datetime] = None
    kind: Optional[str] = None

    @property
    def total_value(self) -> Decimal:
        """Value of the whole order (price * quantity)."""
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert standing order to dictionary for API serialization."""
        return {
            "order_id": str(self.order_id),
            "quantity": str(self.quantity),
            "price": str(self.price),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "kind": self.kind,
        }


@dataclass(frozen=True, slots=True)
class IncomingOrder:
    """
    Order to be fulfilled against the standing orders of one or more exchanges.

    Quantity and price are expected to be positive; that is checked by the
    caller before the order reaches the engine.

    Attributes:
        side: Buy (consumes asks) or sell (consumes bids)
        quantity: Requested quantity
        price: Limit price (maximum for buys, minimum for sells)
        order_id: Unique identifier, reused as the transaction id
        timestamp: Order creation time
    """

    side: OrderSide
    quantity: Decimal
    price: Decimal
    order_id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_buy(self) -> bool:
        """Check if this is a buy order."""
        return self.side == OrderSide.BUY

    @property
    def is_sell(self) -> bool:
        """Check if this is a sell order."""
        return self.side == OrderSide.SELL

    def __repr__(self) -> str:
        return (
            f"IncomingOrder(id={str(self.order_id)[:8]}..., "
            f"{self.side} {self.quantity} @ {self.price})"
        )
