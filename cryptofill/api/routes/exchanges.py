"""
REST API endpoints for exchange snapshots.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Depends, status

from cryptofill.api.models import ExchangeResponse, ErrorResponse
from cryptofill.services.exchange_registry import ExchangeRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/exchanges", tags=["exchanges"])


_registry: ExchangeRegistry = None


def get_registry() -> ExchangeRegistry:
    """Dependency to get ExchangeRegistry instance."""
    if _registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Exchange registry not initialized"
        )
    return _registry


def set_registry(registry: ExchangeRegistry) -> None:
    """Set the global ExchangeRegistry instance."""
    global _registry
    _registry = registry


@router.get(
    "",
    response_model=List[ExchangeResponse],
    summary="List exchanges",
    description="Snapshot of every registered exchange with balances and orders"
)
async def list_exchanges(
    registry: ExchangeRegistry = Depends(get_registry)
) -> List[ExchangeResponse]:
    exchanges = registry.get_exchanges()
    logger.debug(f"Listing {len(exchanges)} exchanges")
    return [ExchangeResponse.from_exchange(exchange) for exchange in exchanges]


@router.get(
    "/{exchange_id}",
    response_model=ExchangeResponse,
    summary="Get exchange",
    description="Snapshot of one exchange",
    responses={
        404: {
            "description": "Exchange not found",
            "model": ErrorResponse
        }
    }
)
async def get_exchange(
    exchange_id: str,
    registry: ExchangeRegistry = Depends(get_registry)
) -> ExchangeResponse:
    # ExchangeNotFoundException is rendered as a 404 by the app handler
    return ExchangeResponse.from_exchange(registry.require_exchange(exchange_id))
