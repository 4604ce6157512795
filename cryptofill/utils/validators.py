"""
Input validation for incoming orders.

Front-ends hand raw user input (strings, floats, Decimals) to these helpers
before anything reaches the fulfillment engine, which trusts its inputs.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Type, Union

from ..core.order import OrderSide
from .exceptions import (
    InvalidOrderException,
    InvalidQuantityException,
    PriceOutOfBoundsException,
    ValidationException,
)

Numeric = Union[str, int, float, Decimal]

SMALLEST_UNIT = Decimal("0.00000001")
DEFAULT_MAX_QUANTITY = Decimal("1000000")
DEFAULT_MAX_PRICE = Decimal("10000000")


def sanitize_decimal(value: Numeric) -> Decimal:
    """
    Turn user input into a finite Decimal.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1").

    Raises:
        InvalidOrderException: If value is not a number, or is NaN/Infinity
    """
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError) as e:
        raise InvalidOrderException(
            f"Invalid decimal value: {value}",
            details={"value": value, "error": str(e)}
        )

    if not result.is_finite():
        raise InvalidOrderException(
            f"Invalid decimal value: {value}",
            details={"value": str(value)}
        )
    return result


def _check_range(
    name: str,
    value: Decimal,
    minimum: Decimal,
    maximum: Decimal,
    error: Type[ValidationException],
) -> None:
    if value <= 0:
        raise error(f"{name.capitalize()} must be positive, got {value}", details={name: str(value)})
    if value < minimum:
        raise error(
            f"{name.capitalize()} {value} is below minimum {minimum}",
            details={name: str(value), "min": str(minimum)}
        )
    if value > maximum:
        raise error(
            f"{name.capitalize()} {value} exceeds maximum {maximum}",
            details={name: str(value), "max": str(maximum)}
        )


def validate_price(
    price: Optional[Decimal],
    min_price: Decimal = SMALLEST_UNIT,
    max_price: Decimal = DEFAULT_MAX_PRICE,
) -> bool:
    """
    Check a limit price. Every incoming order carries one.

    Raises:
        InvalidOrderException: If price is missing
        PriceOutOfBoundsException: If price is not positive or out of bounds
    """
    if price is None:
        raise InvalidOrderException("Price is required")
    _check_range("price", price, min_price, max_price, PriceOutOfBoundsException)
    return True


def validate_quantity(
    quantity: Decimal,
    min_quantity: Decimal = SMALLEST_UNIT,
    max_quantity: Decimal = DEFAULT_MAX_QUANTITY,
) -> bool:
    """
    Raises:
        InvalidQuantityException: If quantity is not positive or out of bounds
    """
    _check_range("quantity", quantity, min_quantity, max_quantity, InvalidQuantityException)
    return True


def validate_order_parameters(
    side: Union[str, OrderSide],
    quantity: Numeric,
    price: Optional[Numeric],
    min_quantity: Decimal = SMALLEST_UNIT,
    max_quantity: Decimal = DEFAULT_MAX_QUANTITY,
    min_price: Decimal = SMALLEST_UNIT,
    max_price: Decimal = DEFAULT_MAX_PRICE,
) -> tuple[OrderSide, Decimal, Decimal]:
    """
    Validate side, quantity and price of an incoming order in one go.

    Returns:
        Tuple of (side, quantity, price) ready for ``IncomingOrder``

    Raises:
        InvalidOrderSideException: If side is not buy or sell
        InvalidOrderException: If a value is not a decimal
        InvalidQuantityException: If quantity is out of bounds
        PriceOutOfBoundsException: If price is out of bounds
    """
    parsed_side = OrderSide.parse(side)

    parsed_quantity = sanitize_decimal(quantity)
    validate_quantity(parsed_quantity, min_quantity, max_quantity)

    parsed_price = None if price is None else sanitize_decimal(price)
    validate_price(parsed_price, min_price, max_price)

    return parsed_side, parsed_quantity, parsed_price
