"""
Fulfillment engine.

Greedily fills an incoming order from the price-sorted candidate sequence
while keeping each exchange within its crypto inventory and fiat funding.
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple, Union

from .candidate_selector import Candidate, select_candidates
from .exchange import ExchangeInfo
from .order import IncomingOrder
from .transaction import Transaction, ZERO
from ..utils.logger import FulfillmentLogger, get_logger


def cap_to_headroom(
    available: Decimal,
    used: Decimal,
    requested: Decimal,
) -> Tuple[Decimal, bool]:
    """
    Limit a requested amount to what is left of a cumulative balance.

    The cap applies as soon as ``used + requested`` meets or exceeds the
    balance, so requesting exactly the headroom returns the same amount
    flagged as capped.

    Args:
        available: Total balance of the exchange
        used: Amount of the balance already consumed in this match
        requested: Amount the next fill would like to use

    Returns:
        Tuple of (amount allowed, whether the cap applied)
    """
    if used + requested >= available:
        return max(ZERO, available - used), True
    return requested, False


class FulfillmentEngine:
    """
    Fills incoming orders against standing orders from several exchanges.

    The engine holds no state between calls. Each call builds and returns
    its own Transaction; exchange snapshots are only read.
    """

    def __init__(self, logger: Optional[FulfillmentLogger] = None):
        """
        Initialize the fulfillment engine.

        Args:
            logger: Sink for match events (defaults to the global logger)
        """
        self.logger = logger if logger is not None else get_logger()

    def create_transaction(
        self,
        exchanges: Union[ExchangeInfo, Iterable[ExchangeInfo]],
        order: IncomingOrder,
    ) -> Transaction:
        """
        Select candidates from the exchanges and fulfill the order.

        Args:
            exchanges: One exchange snapshot or several
            order: Incoming order

        Returns:
            Transaction describing the fills

        Raises:
            InvalidOrderSideException: If the order side is not supported
        """
        if isinstance(exchanges, ExchangeInfo):
            exchanges = [exchanges]

        candidates = select_candidates(exchanges, order)
        return self.fulfill(candidates, order)

    def fulfill(self, candidates: Sequence[Candidate], order: IncomingOrder) -> Transaction:
        """
        Consume candidates in order until the order is filled or they run out.

        Args:
            candidates: Candidates in price priority (see ``select_candidates``)
            order: Incoming order

        Returns:
            Transaction; ``unfulfilled_quantity`` holds what could not be filled
        """
        transaction = Transaction.for_order(order)
        self.logger.log_order_received(
            order.order_id,
            order.side.value,
            order.quantity,
            order.price,
            len(candidates),
        )

        for candidate in candidates:
            if not self._try_fill(transaction, candidate):
                continue

            if transaction.unfulfilled_quantity != 0:
                continue

            self.logger.log_order_complete(order.order_id)
            break

        self.logger.log_transaction_summary(
            order.order_id,
            transaction.filled_quantity,
            transaction.total_cost,
            transaction.unfulfilled_quantity,
            len(transaction.fills),
        )
        return transaction

    def _try_fill(self, transaction: Transaction, candidate: Candidate) -> bool:
        """
        Take as much as allowed from one candidate.

        Quantity is capped by the exchange's crypto first, then the cost by
        its fiat; a fiat cap re-derives quantity from the capped cost.

        Returns:
            True if a fill line was added
        """
        exchange = candidate.exchange
        standing = candidate.order

        quantity = min(transaction.unfulfilled_quantity, standing.quantity)
        if quantity == 0:
            return False

        quantity, _ = cap_to_headroom(
            exchange.crypto_balance,
            transaction.quantity_used(exchange.exchange_id),
            quantity,
        )
        if quantity == 0:
            self.logger.log_exchange_exhausted(
                transaction.transaction_id, exchange.exchange_id, "crypto"
            )
            return False

        cost, cost_capped = cap_to_headroom(
            exchange.fiat_balance,
            transaction.cost_used(exchange.exchange_id),
            quantity * standing.price,
        )
        if cost == 0:
            self.logger.log_exchange_exhausted(
                transaction.transaction_id, exchange.exchange_id, "funds"
            )
            return False
        if cost_capped:
            quantity = cost / standing.price

        transaction.add_fill(candidate, quantity, cost)
        self.logger.log_fill(
            transaction.transaction_id,
            exchange.exchange_id,
            quantity,
            cost,
            standing.price,
        )
        return True
