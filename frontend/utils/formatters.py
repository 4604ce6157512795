"""Formatting Utilities for UI Display"""
from decimal import Decimal, InvalidOperation
from datetime import datetime
from typing import Optional, Union

Number = Union[str, Decimal, float, int]


def format_price(price: Optional[Number], decimals: int = 2) -> str:
    if price is None:
        return "N/A"
    try:
        return f"{Decimal(str(price)):,.{decimals}f}"
    except (InvalidOperation, ValueError):
        return str(price)


def format_quantity(qty: Optional[Number], decimals: int = 8) -> str:
    if qty is None:
        return "N/A"
    try:
        # Drop trailing zeros but keep at least one digit after the point
        text = f"{Decimal(str(qty)):,.{decimals}f}".rstrip("0")
        return text + "0" if text.endswith(".") else text
    except (InvalidOperation, ValueError):
        return str(qty)


def format_timestamp(ts: Union[str, datetime, None]) -> str:
    if ts is None:
        return "N/A"
    try:
        if isinstance(ts, str):
            ts = datetime.fromisoformat(ts.replace('Z', '+00:00'))
        return ts.strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return str(ts)


def color_by_side(side: str) -> str:
    side_lower = side.lower()
    if side_lower == "buy":
        return "#10b981"
    elif side_lower == "sell":
        return "#ef4444"
    else:
        return "#6b7280"


def format_order_id(order_id: str) -> str:
    order_id = str(order_id)
    if len(order_id) > 16:
        return f"{order_id[:8]}...{order_id[-4:]}"
    return order_id
