"""
Exchange snapshot model

A point-in-time, read-only view of one exchange: the funds it can move and
its resting asks and bids.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple, Dict, Any

from .order import StandingOrder


@dataclass(frozen=True, slots=True)
class AvailableFunds:
    """
    Balances an exchange can use during one match.

    Attributes:
        crypto: Crypto inventory, caps cumulative quantity taken
        fiat: Fiat funding, caps cumulative cost paid
    """
    crypto: Decimal = Decimal("0")
    fiat: Decimal = Decimal("0")


@dataclass(frozen=True, slots=True)
class ExchangeInfo:
    """
    Immutable snapshot of an exchange.

    Asks and bids are kept in the order they were loaded; candidate
    selection sorts them by price itself.
    """

    exchange_id: str
    funds: AvailableFunds = field(default_factory=AvailableFunds)
    asks: Tuple[StandingOrder, ...] = ()
    bids: Tuple[StandingOrder, ...] = ()

    def __post_init__(self):
        if not self.exchange_id or not self.exchange_id.strip():
            raise ValueError("Exchange id cannot be empty")
        # Accept lists from callers but store tuples
        object.__setattr__(self, "asks", tuple(self.asks))
        object.__setattr__(self, "bids", tuple(self.bids))

    @property
    def crypto_balance(self) -> Decimal:
        return self.funds.crypto

    @property
    def fiat_balance(self) -> Decimal:
        return self.funds.fiat

    @property
    def best_ask(self) -> Optional[Decimal]:
        """Lowest ask price, None if there are no asks."""
        return min((ask.price for ask in self.asks), default=None)

    @property
    def best_bid(self) -> Optional[Decimal]:
        """Highest bid price, None if there are no bids."""
        return max((bid.price for bid in self.bids), default=None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exchange snapshot to dictionary for API serialization."""
        return {
            "exchange_id": self.exchange_id,
            "crypto_balance": str(self.crypto_balance),
            "fiat_balance": str(self.fiat_balance),
            "best_ask": str(self.best_ask) if self.best_ask is not None else None,
            "best_bid": str(self.best_bid) if self.best_bid is not None else None,
            "asks": [ask.to_dict() for ask in self.asks],
            "bids": [bid.to_dict() for bid in self.bids],
        }

    def __repr__(self) -> str:
        return (
            f"ExchangeInfo(id={self.exchange_id}, crypto={self.crypto_balance}, "
            f"fiat={self.fiat_balance}, asks={len(self.asks)}, bids={len(self.bids)})"
        )
