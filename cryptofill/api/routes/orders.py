"""
REST API endpoints for order fulfillment.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Depends, status

from cryptofill.api.models import (
    OrderRequest,
    TransactionResponse,
    ErrorResponse
)
from cryptofill.services.order_service import OrderService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


# Set from main.py during startup
_order_service: OrderService = None


def get_order_service() -> OrderService:
    """Dependency to get OrderService instance."""
    if _order_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Order service not initialized"
        )
    return _order_service


def set_order_service(service: OrderService) -> None:
    """Set the global OrderService instance."""
    global _order_service
    _order_service = service


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Fulfill an order",
    description="Fill a buy or sell order against the standing orders of the "
                "registered exchanges, within each exchange's crypto and fiat balance.",
    responses={
        201: {
            "description": "Order processed (possibly partially or not filled)",
            "model": TransactionResponse
        },
        400: {
            "description": "Invalid order parameters",
            "model": ErrorResponse
        },
        404: {
            "description": "Unknown exchange id",
            "model": ErrorResponse
        },
        422: {
            "description": "Validation error",
            "model": ErrorResponse
        },
        503: {
            "description": "Service unavailable"
        }
    }
)
async def submit_order(
    order_request: OrderRequest,
    order_service: OrderService = Depends(get_order_service)
) -> TransactionResponse:
    """
    Fulfill an order.

    **Request Body:**
    - `side`: buy or sell
    - `quantity`: Requested quantity (positive decimal string)
    - `price`: Limit price (positive decimal string)
    - `exchange_ids`: Optional list of exchanges to use

    **Response:**
    - Transaction with totals, fill lines and per-exchange usage.
      An order nothing could fill is still a 201 with zero fills.
    """
    logger.info(
        f"Received order request: {order_request.side} "
        f"{order_request.quantity} @ {order_request.price}"
    )
    # Domain exceptions propagate to the handlers registered in main.py
    transaction = order_service.submit_order(**order_request.to_order_params())

    logger.info(
        f"Order {transaction.transaction_id} processed: "
        f"filled={transaction.filled_quantity}, unfulfilled={transaction.unfulfilled_quantity}"
    )
    return TransactionResponse.from_transaction(transaction, datetime.now(timezone.utc))
