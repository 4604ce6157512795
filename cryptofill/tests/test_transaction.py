"""
Tests for the domain models: orders, exchange snapshots and transactions.
"""

from decimal import Decimal

import pytest

from cryptofill.core.candidate_selector import Candidate
from cryptofill.core.exchange import AvailableFunds, ExchangeInfo
from cryptofill.core.order import IncomingOrder, OrderSide, StandingOrder
from cryptofill.core.transaction import Transaction
from cryptofill.utils.exceptions import InvalidOrderSideException


@pytest.fixture
def snapshot():
    return ExchangeInfo(
        exchange_id="exchange-01",
        funds=AvailableFunds(crypto=Decimal("5"), fiat=Decimal("100")),
        asks=[StandingOrder(Decimal("2"), Decimal("10")), StandingOrder(Decimal("3"), Decimal("8"))],
        bids=[StandingOrder(Decimal("1"), Decimal("7"))],
    )


class TestOrderSide:
    """Parsing of user supplied sides."""

    @pytest.mark.parametrize("raw,expected", [
        ("buy", OrderSide.BUY),
        ("Buy", OrderSide.BUY),
        (" SELL ", OrderSide.SELL),
        (OrderSide.SELL, OrderSide.SELL),
    ])
    def test_parse(self, raw, expected):
        assert OrderSide.parse(raw) == expected

    def test_parse_rejects_unknown_side(self):
        with pytest.raises(InvalidOrderSideException) as exc_info:
            OrderSide.parse("hold")

        assert exc_info.value.details["valid_sides"] == ["BUY", "SELL"]

    def test_str(self):
        assert str(OrderSide.BUY) == "BUY"


class TestExchangeInfo:
    """Exchange snapshot behaviour."""

    def test_lists_are_stored_as_tuples(self, snapshot):
        assert isinstance(snapshot.asks, tuple)
        assert isinstance(snapshot.bids, tuple)

    def test_best_prices(self, snapshot):
        assert snapshot.best_ask == Decimal("8")
        assert snapshot.best_bid == Decimal("7")

    def test_best_prices_of_empty_book(self):
        empty = ExchangeInfo(exchange_id="empty")

        assert empty.best_ask is None
        assert empty.best_bid is None
        assert empty.crypto_balance == Decimal("0")
        assert empty.fiat_balance == Decimal("0")

    def test_empty_id_is_rejected(self):
        with pytest.raises(ValueError):
            ExchangeInfo(exchange_id="  ")

    def test_to_dict(self, snapshot):
        data = snapshot.to_dict()

        assert data["exchange_id"] == "exchange-01"
        assert data["crypto_balance"] == "5"
        assert data["best_ask"] == "8"
        assert len(data["asks"]) == 2
        assert data["asks"][0]["price"] == "10"


class TestTransaction:
    """Fill bookkeeping."""

    def test_new_transaction_is_empty(self):
        order = IncomingOrder(OrderSide.BUY, Decimal("4"), Decimal("10"))

        transaction = Transaction.for_order(order)

        assert transaction.transaction_id == order.order_id
        assert transaction.filled_quantity == Decimal("0")
        assert transaction.unfulfilled_quantity == Decimal("4")
        assert not transaction.has_fills
        assert not transaction.is_fully_filled
        assert transaction.average_price is None

    def test_usage_reads_zero_before_first_fill(self):
        transaction = Transaction.for_order(IncomingOrder(OrderSide.BUY, Decimal("1"), Decimal("1")))

        assert transaction.quantity_used("nowhere") == Decimal("0")
        assert transaction.cost_used("nowhere") == Decimal("0")
        assert transaction.exchange_quantity_usage == {}

    def test_add_fill_updates_totals(self, snapshot):
        transaction = Transaction.for_order(IncomingOrder(OrderSide.BUY, Decimal("4"), Decimal("10")))

        fill = transaction.add_fill(Candidate(snapshot, snapshot.asks[1]), Decimal("3"), Decimal("24"))
        transaction.add_fill(Candidate(snapshot, snapshot.asks[0]), Decimal("1"), Decimal("10"))

        assert fill.standing_order_id == snapshot.asks[1].order_id
        assert fill.standing_order_remaining == Decimal("0")
        assert transaction.filled_quantity == Decimal("4")
        assert transaction.total_cost == Decimal("34")
        assert transaction.unfulfilled_quantity == Decimal("0")
        assert transaction.is_fully_filled
        assert transaction.average_price == Decimal("8.5")
        assert transaction.quantity_used("exchange-01") == Decimal("4")
        assert transaction.cost_used("exchange-01") == Decimal("34")

    def test_fill_remaining_is_informational(self, snapshot):
        transaction = Transaction.for_order(IncomingOrder(OrderSide.BUY, Decimal("1"), Decimal("10")))

        fill = transaction.add_fill(Candidate(snapshot, snapshot.asks[0]), Decimal("0.5"), Decimal("5"))

        assert fill.standing_order_remaining == Decimal("1.5")
        assert snapshot.asks[0].quantity == Decimal("2")

    def test_to_dict(self, snapshot):
        transaction = Transaction.for_order(IncomingOrder(OrderSide.SELL, Decimal("2"), Decimal("5")))
        transaction.add_fill(Candidate(snapshot, snapshot.bids[0]), Decimal("1"), Decimal("7"))

        data = transaction.to_dict()

        assert data["side"] == "SELL"
        assert data["filled_quantity"] == "1"
        assert data["unfulfilled_quantity"] == "1"
        assert data["average_price"] == "7"
        assert data["fills"][0]["quantity_taken"] == "1"
        assert data["fills"][0]["cost_paid"] == "7"
        assert data["exchange_cost_usage"] == {"exchange-01": "7"}
