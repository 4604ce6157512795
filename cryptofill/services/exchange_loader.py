"""
Exchange snapshot loader.

Reads exchange snapshot JSON files and turns them into immutable
ExchangeInfo values. The file layout is:

    {"Id": "exchange-01",
     "AvailableFunds": {"Crypto": 10.5, "Euro": 120000},
     "OrderBook": {"Bids": [{"Order": {...}}], "Asks": [{"Order": {...}}]}}

Numbers are parsed straight into Decimal so no value passes through float.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cryptofill.core.exchange import AvailableFunds, ExchangeInfo
from cryptofill.core.order import StandingOrder
from cryptofill.utils.exceptions import ExchangeDataException

logger = logging.getLogger(__name__)


# ============================================================================
# File schema
# ============================================================================

class OrderRecord(BaseModel):
    """A standing order as stored in a snapshot file."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[UUID] = Field(None, alias="Id")
    time: Optional[datetime] = Field(None, alias="Time")
    type: Optional[str] = Field(None, alias="Type")
    kind: Optional[str] = Field(None, alias="Kind")
    amount: Decimal = Field(..., alias="Amount", ge=0)
    price: Decimal = Field(..., alias="Price", gt=0)

    def to_standing_order(self) -> StandingOrder:
        return StandingOrder(
            quantity=self.amount,
            price=self.price,
            order_id=self.id or uuid4(),
            timestamp=self.time,
            kind=self.kind,
        )


class OrderHolderRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order: OrderRecord = Field(..., alias="Order")


class OrderBookRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bids: List[OrderHolderRecord] = Field(default_factory=list, alias="Bids")
    asks: List[OrderHolderRecord] = Field(default_factory=list, alias="Asks")


class AvailableFundsRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    crypto: Decimal = Field(Decimal("0"), alias="Crypto", ge=0)
    euro: Decimal = Field(Decimal("0"), alias="Euro", ge=0)


class ExchangeRecord(BaseModel):
    """Top-level snapshot file document."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="Id", min_length=1)
    available_funds: AvailableFundsRecord = Field(
        default_factory=AvailableFundsRecord, alias="AvailableFunds"
    )
    order_book: OrderBookRecord = Field(default_factory=OrderBookRecord, alias="OrderBook")

    def to_exchange_info(self) -> ExchangeInfo:
        return ExchangeInfo(
            exchange_id=self.id,
            funds=AvailableFunds(
                crypto=self.available_funds.crypto,
                fiat=self.available_funds.euro,
            ),
            asks=tuple(holder.order.to_standing_order() for holder in self.order_book.asks),
            bids=tuple(holder.order.to_standing_order() for holder in self.order_book.bids),
        )


# ============================================================================
# Loading
# ============================================================================

def parse_exchange_payload(payload: str, source: str = "<string>") -> ExchangeInfo:
    """
    Parse one exchange snapshot document.

    Args:
        payload: JSON text
        source: Name used in error messages

    Returns:
        ExchangeInfo snapshot

    Raises:
        ExchangeDataException: If the document is not valid
    """
    try:
        raw = json.loads(payload, parse_float=Decimal, parse_int=Decimal)
    except json.JSONDecodeError as e:
        raise ExchangeDataException(
            f"Exchange data could not be read from {source}: {e}",
            details={"source": source, "error": str(e)}
        ) from e

    if raw is None:
        raise ExchangeDataException(
            f"Exchange data could not be read from {source}: empty document",
            details={"source": source}
        )

    try:
        record = ExchangeRecord.model_validate(raw)
    except ValidationError as e:
        raise ExchangeDataException(
            f"Invalid exchange data in {source}",
            details={"source": source, "errors": e.errors(include_url=False)}
        ) from e

    return record.to_exchange_info()


def load_exchange_file(path: Union[str, Path]) -> ExchangeInfo:
    """
    Load one exchange snapshot file.

    Raises:
        ExchangeDataException: If the file is missing or invalid
    """
    path = Path(path)
    try:
        payload = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise ExchangeDataException(
            f"Exchange data file could not be opened: {path}",
            details={"source": str(path), "error": str(e)}
        ) from e

    exchange = parse_exchange_payload(payload, source=str(path))
    logger.info(
        f"Loaded exchange '{exchange.exchange_id}' from {path}: "
        f"{len(exchange.asks)} asks, {len(exchange.bids)} bids"
    )
    return exchange


def load_exchanges(paths: Iterable[Union[str, Path]]) -> List[ExchangeInfo]:
    """Load several snapshot files, preserving the given order."""
    return [load_exchange_file(path) for path in paths]
