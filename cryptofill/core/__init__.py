"""
Core domain models and fulfillment logic
"""

from .order import OrderSide, StandingOrder, IncomingOrder
from .exchange import AvailableFunds, ExchangeInfo
from .candidate_selector import Candidate, select_candidates
from .transaction import FillLine, Transaction
from .fulfillment_engine import FulfillmentEngine, cap_to_headroom

__all__ = [
    "OrderSide",
    "StandingOrder",
    "IncomingOrder",
    "AvailableFunds",
    "ExchangeInfo",
    "Candidate",
    "select_candidates",
    "FillLine",
    "Transaction",
    "FulfillmentEngine",
    "cap_to_headroom",
]
