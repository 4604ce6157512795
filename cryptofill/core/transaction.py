"""
Transaction (fill report) domain model

A Transaction accumulates the fill lines produced while fulfilling one
incoming order, together with running totals and per-exchange usage.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Any
from uuid import UUID

from .candidate_selector import Candidate
from .order import IncomingOrder, OrderSide

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class FillLine:
    """
    One standing order, partially or fully consumed during a match.

    The remaining quantity is informational only; the standing order
    itself is never modified.

    Attributes:
        standing_order_id: ID of the consumed standing order
        quantity: Quantity taken from the standing order
        cost: Cost paid for that quantity
        standing_order_quantity: Original quantity of the standing order
        standing_order_remaining: Quantity that would be left on it
        price: Price of the standing order
        exchange_id: Exchange the standing order rests on
    """

    standing_order_id: UUID
    quantity: Decimal
    cost: Decimal
    standing_order_quantity: Decimal
    standing_order_remaining: Decimal
    price: Decimal
    exchange_id: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert fill line to dictionary for API serialization."""
        return {
            "standing_order_id": str(self.standing_order_id),
            "quantity_taken": str(self.quantity),
            "cost_paid": str(self.cost),
            "standing_order_original_quantity": str(self.standing_order_quantity),
            "standing_order_remaining_quantity": str(self.standing_order_remaining),
            "price": str(self.price),
            "exchange_id": self.exchange_id,
        }


@dataclass
class Transaction:
    """
    Fill report for one incoming order.

    Only ``add_fill`` changes the totals, which keeps these invariants:

    - ``filled_quantity + unfulfilled_quantity == requested_quantity``
    - ``filled_quantity`` is the sum of fill quantities
    - ``total_cost`` is the sum of fill costs

    Per-exchange usage entries are created on the first fill from that
    exchange; ``quantity_used``/``cost_used`` read them as zero until then.
    """

    transaction_id: UUID
    side: OrderSide
    requested_quantity: Decimal
    filled_quantity: Decimal = ZERO
    total_cost: Decimal = ZERO
    fills: List[FillLine] = field(default_factory=list)
    unfulfilled_quantity: Decimal = field(init=False)
    exchange_quantity_usage: Dict[str, Decimal] = field(default_factory=dict)
    exchange_cost_usage: Dict[str, Decimal] = field(default_factory=dict)

    def __post_init__(self):
        self.unfulfilled_quantity = self.requested_quantity - self.filled_quantity

    @classmethod
    def for_order(cls, order: IncomingOrder) -> "Transaction":
        """Create an empty transaction for an incoming order."""
        return cls(
            transaction_id=order.order_id,
            side=order.side,
            requested_quantity=order.quantity,
        )

    def quantity_used(self, exchange_id: str) -> Decimal:
        """Cumulative quantity taken from an exchange so far."""
        return self.exchange_quantity_usage.get(exchange_id, ZERO)

    def cost_used(self, exchange_id: str) -> Decimal:
        """Cumulative cost paid on an exchange so far."""
        return self.exchange_cost_usage.get(exchange_id, ZERO)

    def add_fill(self, candidate: Candidate, quantity: Decimal, cost: Decimal) -> FillLine:
        """
        Record a slice taken from a candidate standing order.

        Args:
            candidate: Exchange and standing order the slice comes from
            quantity: Quantity taken
            cost: Cost paid for the quantity

        Returns:
            The fill line that was appended
        """
        standing = candidate.order
        exchange_id = candidate.exchange_id

        fill = FillLine(
            standing_order_id=standing.order_id,
            quantity=quantity,
            cost=cost,
            standing_order_quantity=standing.quantity,
            standing_order_remaining=standing.quantity - quantity,
            price=standing.price,
            exchange_id=exchange_id,
        )
        self.fills.append(fill)

        self.filled_quantity += quantity
        self.total_cost += cost
        self.unfulfilled_quantity -= quantity

        self.exchange_quantity_usage[exchange_id] = self.quantity_used(exchange_id) + quantity
        self.exchange_cost_usage[exchange_id] = self.cost_used(exchange_id) + cost

        return fill

    @property
    def is_fully_filled(self) -> bool:
        return self.unfulfilled_quantity == 0

    @property
    def has_fills(self) -> bool:
        return bool(self.fills)

    @property
    def average_price(self) -> Optional[Decimal]:
        """Average price paid per unit, None when nothing was filled."""
        if self.filled_quantity == 0:
            return None
        return self.total_cost / self.filled_quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert transaction to dictionary for API serialization."""
        average_price = self.average_price
        return {
            "transaction_id": str(self.transaction_id),
            "side": self.side.value,
            "requested_quantity": str(self.requested_quantity),
            "filled_quantity": str(self.filled_quantity),
            "total_cost": str(self.total_cost),
            "unfulfilled_quantity": str(self.unfulfilled_quantity),
            "average_price": str(average_price) if average_price is not None else None,
            "fills": [fill.to_dict() for fill in self.fills],
            "exchange_quantity_usage": {k: str(v) for k, v in self.exchange_quantity_usage.items()},
            "exchange_cost_usage": {k: str(v) for k, v in self.exchange_cost_usage.items()},
        }

    def __repr__(self) -> str:
        return (
            f"Transaction(id={str(self.transaction_id)[:8]}..., {self.side.value}, "
            f"filled={self.filled_quantity}/{self.requested_quantity}, "
            f"cost={self.total_cost}, fills={len(self.fills)})"
        )
