"""
Pydantic models for API request/response validation.

This module defines all data models used in the REST API, ensuring type
safety and validation. Decimal values travel as strings.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, Field, field_validator, ConfigDict

from cryptofill.core.exchange import ExchangeInfo
from cryptofill.core.order import StandingOrder
from cryptofill.core.transaction import FillLine, Transaction

DECIMAL_PATTERN = r'^\d+(\.\d+)?$'


# ============================================================================
# Request Models
# ============================================================================

class OrderRequest(BaseModel):
    """Request model for submitting an order to fulfill."""

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "side": "buy",
            "quantity": "9",
            "price": "3500.00"
        }
    })

    side: str = Field(
        ...,
        description="Order side: buy or sell",
        pattern=r'^(buy|sell|Buy|Sell|BUY|SELL)$'
    )
    quantity: str = Field(
        ...,
        description="Requested quantity as decimal string",
        pattern=DECIMAL_PATTERN
    )
    price: str = Field(
        ...,
        description="Limit price as decimal string",
        pattern=DECIMAL_PATTERN
    )
    exchange_ids: Optional[List[str]] = Field(
        None,
        description="Restrict the order to these exchanges (all if omitted)"
    )

    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v: str) -> str:
        """Validate quantity is positive."""
        if Decimal(v) <= 0:
            raise ValueError("Quantity must be positive")
        return v

    @field_validator('price')
    @classmethod
    def validate_price(cls, v: str) -> str:
        """Validate price is positive."""
        if Decimal(v) <= 0:
            raise ValueError("Price must be positive")
        return v

    def to_order_params(self) -> Dict[str, Any]:
        """Convert to parameters for the order service."""
        return {
            "side": self.side.lower(),
            "quantity": Decimal(self.quantity),
            "price": Decimal(self.price),
            "exchange_ids": self.exchange_ids,
        }


# ============================================================================
# Response Models
# ============================================================================

class FillResponse(BaseModel):
    """Response model for a fill line."""

    standing_order_id: str = Field(..., description="Consumed standing order")
    quantity_taken: str = Field(..., description="Quantity taken from the standing order")
    cost_paid: str = Field(..., description="Cost paid for that quantity")
    standing_order_original_quantity: str = Field(..., description="Original standing order quantity")
    standing_order_remaining_quantity: str = Field(..., description="Quantity left on the standing order")
    price: str = Field(..., description="Standing order price")
    exchange_id: str = Field(..., description="Exchange of the standing order")

    @classmethod
    def from_fill(cls, fill: FillLine) -> 'FillResponse':
        return cls(**fill.to_dict())


class TransactionResponse(BaseModel):
    """Response model for a fulfilled order."""

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "transaction_id": "550e8400-e29b-41d4-a716-446655440000",
            "side": "buy",
            "requested_quantity": "9",
            "filled_quantity": "9",
            "total_cost": "27600",
            "unfulfilled_quantity": "0",
            "average_price": "3066.666666666666666666666667",
            "fills": [
                {
                    "standing_order_id": "650e8400-e29b-41d4-a716-446655440000",
                    "quantity_taken": "7",
                    "cost_paid": "21000",
                    "standing_order_original_quantity": "7",
                    "standing_order_remaining_quantity": "0",
                    "price": "3000",
                    "exchange_id": "exchange-01"
                }
            ],
            "exchange_quantity_usage": {"exchange-01": "9"},
            "exchange_cost_usage": {"exchange-01": "27600"},
            "timestamp": "2025-10-25T10:30:45.123456"
        }
    })

    transaction_id: str = Field(..., description="Transaction id (the order id)")
    side: str = Field(..., description="Order side: buy/sell")
    requested_quantity: str = Field(..., description="Quantity requested")
    filled_quantity: str = Field(..., description="Quantity filled")
    total_cost: str = Field(..., description="Total cost of all fills")
    unfulfilled_quantity: str = Field(..., description="Quantity that could not be filled")
    average_price: Optional[str] = Field(None, description="Average price per unit")
    fills: List[FillResponse] = Field(default_factory=list, description="Fill lines in execution order")
    exchange_quantity_usage: Dict[str, str] = Field(default_factory=dict, description="Quantity used per exchange")
    exchange_cost_usage: Dict[str, str] = Field(default_factory=dict, description="Cost used per exchange")
    timestamp: datetime = Field(..., description="Response timestamp")

    @classmethod
    def from_transaction(cls, transaction: Transaction, timestamp: datetime) -> 'TransactionResponse':
        """Create from Transaction object."""
        data = transaction.to_dict()
        return cls(
            transaction_id=data["transaction_id"],
            side=data["side"].lower(),
            requested_quantity=data["requested_quantity"],
            filled_quantity=data["filled_quantity"],
            total_cost=data["total_cost"],
            unfulfilled_quantity=data["unfulfilled_quantity"],
            average_price=data["average_price"],
            fills=[FillResponse.from_fill(fill) for fill in transaction.fills],
            exchange_quantity_usage=data["exchange_quantity_usage"],
            exchange_cost_usage=data["exchange_cost_usage"],
            timestamp=timestamp,
        )


class StandingOrderResponse(BaseModel):
    """Response model for a standing order."""

    order_id: str
    quantity: str
    price: str
    timestamp: Optional[str] = None
    kind: Optional[str] = None

    @classmethod
    def from_standing_order(cls, order: StandingOrder) -> 'StandingOrderResponse':
        return cls(**order.to_dict())


class ExchangeResponse(BaseModel):
    """Response model for an exchange snapshot."""

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "exchange_id": "exchange-01",
            "crypto_balance": "10.5",
            "fiat_balance": "120000",
            "best_ask": "3000",
            "best_bid": "2950.1",
            "asks": [],
            "bids": []
        }
    })

    exchange_id: str = Field(..., description="Exchange identifier")
    crypto_balance: str = Field(..., description="Available crypto inventory")
    fiat_balance: str = Field(..., description="Available fiat funding")
    best_ask: Optional[str] = Field(None, description="Lowest ask price")
    best_bid: Optional[str] = Field(None, description="Highest bid price")
    asks: List[StandingOrderResponse] = Field(default_factory=list, description="Asks as loaded")
    bids: List[StandingOrderResponse] = Field(default_factory=list, description="Bids as loaded")

    @classmethod
    def from_exchange(cls, exchange: ExchangeInfo) -> 'ExchangeResponse':
        """Create from ExchangeInfo object."""
        data = exchange.to_dict()
        return cls(
            exchange_id=data["exchange_id"],
            crypto_balance=data["crypto_balance"],
            fiat_balance=data["fiat_balance"],
            best_ask=data["best_ask"],
            best_bid=data["best_bid"],
            asks=[StandingOrderResponse.from_standing_order(o) for o in exchange.asks],
            bids=[StandingOrderResponse.from_standing_order(o) for o in exchange.bids],
        )


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Check timestamp")
    version: str = Field(..., description="API version")
    exchanges_loaded: int = Field(..., description="Number of registered exchanges")
    order_service: Dict[str, Any] = Field(..., description="Order service statistics")


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    timestamp: datetime = Field(..., description="Error timestamp")
