"""
Candidate selection across exchanges

Collects the standing orders an incoming order may trade against and puts
them in price priority across all exchanges.
"""

from dataclasses import dataclass
from typing import Iterable, List

from .exchange import ExchangeInfo
from .order import IncomingOrder, OrderSide, StandingOrder
from ..utils.exceptions import InvalidOrderSideException


@dataclass(frozen=True, slots=True)
class Candidate:
    """A standing order together with the exchange it rests on."""

    exchange: ExchangeInfo
    order: StandingOrder

    @property
    def exchange_id(self) -> str:
        return self.exchange.exchange_id

    @property
    def price(self):
        return self.order.price


def select_candidates(
    exchanges: Iterable[ExchangeInfo],
    order: IncomingOrder,
) -> List[Candidate]:
    """
    Build the price-sorted candidate sequence for an incoming order.

    Buy orders take asks priced at or below the limit, cheapest first.
    Sell orders take bids priced at or above the limit, highest first.
    Equal prices keep input order (exchange order, then list order).

    Args:
        exchanges: Exchange snapshots, in priority order for ties
        order: Incoming order

    Returns:
        Candidates in the order they should be consumed

    Raises:
        InvalidOrderSideException: If the order side is not BUY or SELL
    """
    if order.side == OrderSide.BUY:
        candidates = [
            Candidate(exchange, ask)
            for exchange in exchanges
            for ask in exchange.asks
            if ask.price <= order.price
        ]
        return sorted(candidates, key=lambda c: c.order.price)

    if order.side == OrderSide.SELL:
        candidates = [
            Candidate(exchange, bid)
            for exchange in exchanges
            for bid in exchange.bids
            if bid.price >= order.price
        ]
        return sorted(candidates, key=lambda c: c.order.price, reverse=True)

    raise InvalidOrderSideException(
        f"Unsupported order side: {order.side}",
        details={"order_id": str(order.order_id), "side": str(order.side)}
    )
