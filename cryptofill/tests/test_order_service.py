"""
Tests for the order service and input validation.
"""

from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from cryptofill.config import Settings
from cryptofill.core.exchange import AvailableFunds, ExchangeInfo
from cryptofill.core.fulfillment_engine import FulfillmentEngine
from cryptofill.core.order import OrderSide, StandingOrder
from cryptofill.services.exchange_registry import ExchangeRegistry
from cryptofill.services.order_service import OrderService
from cryptofill.utils.exceptions import (
    ExchangeNotFoundException,
    InvalidOrderException,
    InvalidOrderSideException,
    InvalidQuantityException,
    PriceOutOfBoundsException,
    ValidationException,
)
from cryptofill.utils.validators import (
    sanitize_decimal,
    validate_order_parameters,
    validate_price,
    validate_quantity,
)


def build_registry() -> ExchangeRegistry:
    registry = ExchangeRegistry()
    registry.update_exchange(ExchangeInfo(
        exchange_id="A",
        funds=AvailableFunds(crypto=Decimal("1"), fiat=Decimal("100000")),
        asks=(StandingOrder(Decimal("7"), Decimal("3000")),),
        bids=(StandingOrder(Decimal("2"), Decimal("2900")),),
    ))
    registry.update_exchange(ExchangeInfo(
        exchange_id="B",
        funds=AvailableFunds(crypto=Decimal("100"), fiat=Decimal("100000")),
        asks=(StandingOrder(Decimal("7"), Decimal("3000")), StandingOrder(Decimal("4"), Decimal("3300"))),
    ))
    return registry


@pytest.fixture
def service():
    return OrderService(build_registry(), FulfillmentEngine(logger=MagicMock()), Settings())


class TestSubmitOrder:
    """Order submission through the service."""

    def test_buy_across_exchanges(self, service):
        transaction = service.submit_order("buy", "9", "100000")

        assert transaction.side == OrderSide.BUY
        assert transaction.filled_quantity == Decimal("9")
        assert transaction.total_cost == Decimal("27300")
        assert transaction.exchange_quantity_usage == {"A": Decimal("1"), "B": Decimal("8")}

    def test_restricted_to_exchange_ids(self, service):
        transaction = service.submit_order("BUY", Decimal("9"), Decimal("100000"), exchange_ids=["B"])

        assert {f.exchange_id for f in transaction.fills} == {"B"}
        assert transaction.filled_quantity == Decimal("9")

    def test_sell(self, service):
        transaction = service.submit_order(OrderSide.SELL, "5", "2900")

        assert transaction.filled_quantity == Decimal("1")
        assert transaction.total_cost == Decimal("2900")

    def test_order_id_is_used_as_transaction_id(self, service):
        order_id = uuid4()

        transaction = service.submit_order("buy", "1", "3000", order_id=order_id)

        assert transaction.transaction_id == order_id

    def test_unknown_exchange(self, service):
        with pytest.raises(ExchangeNotFoundException):
            service.submit_order("buy", "1", "3000", exchange_ids=["nope"])

    def test_invalid_side(self, service):
        with pytest.raises(InvalidOrderSideException):
            service.submit_order("hold", "1", "3000")

    @pytest.mark.parametrize("quantity,price", [
        ("0", "3000"),
        ("-1", "3000"),
        ("abc", "3000"),
        ("1", "0"),
        ("1", "NaN"),
        ("1", "99999999"),
    ])
    def test_invalid_values_raise_validation_error(self, service, quantity, price):
        with pytest.raises(ValidationException):
            service.submit_order("buy", quantity, price)

    def test_statistics(self, service):
        service.submit_order("buy", "1", "3000")
        service.submit_order("buy", "100", "3300")
        service.submit_order("buy", "1", "1")

        stats = service.get_statistics()

        assert stats["orders_processed"] == 3
        assert stats["orders_filled"] == 1
        assert stats["orders_partial"] == 1
        assert stats["orders_unfilled"] == 1
        assert stats["fills_generated"] == 4

    def test_statistics_is_a_copy(self, service):
        service.get_statistics()["orders_processed"] = 99

        assert service.get_statistics()["orders_processed"] == 0

    def test_order_limits_come_from_settings(self):
        settings = Settings(max_order_quantity=Decimal("5"))
        service = OrderService(build_registry(), FulfillmentEngine(logger=MagicMock()), settings)

        with pytest.raises(InvalidQuantityException):
            service.submit_order("buy", "6", "3000")


class TestValidators:
    """Standalone validation helpers."""

    def test_sanitize_decimal(self):
        assert sanitize_decimal("1.50") == Decimal("1.50")
        assert sanitize_decimal(0.1) == Decimal("0.1")
        assert sanitize_decimal(3) == Decimal("3")

    @pytest.mark.parametrize("value", ["abc", "", "Infinity", "NaN", None])
    def test_sanitize_decimal_rejects(self, value):
        with pytest.raises(InvalidOrderException):
            sanitize_decimal(value)

    def test_validate_price(self):
        assert validate_price(Decimal("1"))

        with pytest.raises(InvalidOrderException):
            validate_price(None)
        with pytest.raises(PriceOutOfBoundsException):
            validate_price(Decimal("-1"))
        with pytest.raises(PriceOutOfBoundsException):
            validate_price(Decimal("5"), max_price=Decimal("4"))

    def test_validate_quantity(self):
        assert validate_quantity(Decimal("0.5"))

        with pytest.raises(InvalidQuantityException):
            validate_quantity(Decimal("0"))
        with pytest.raises(InvalidQuantityException):
            validate_quantity(Decimal("0.5"), min_quantity=Decimal("1"))

    def test_validate_order_parameters(self):
        side, quantity, price = validate_order_parameters("sell", "2", "10.5")

        assert side == OrderSide.SELL
        assert quantity == Decimal("2")
        assert price == Decimal("10.5")


class TestSettings:
    """Configuration parsing."""

    def test_exchange_files_are_split(self):
        settings = Settings(exchange_data_paths=" a.json, ,b.json ")

        assert settings.exchange_files == ["a.json", "b.json"]

    def test_log_level_is_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self):
        with pytest.raises(ValueError):
            Settings(log_level="chatty")
