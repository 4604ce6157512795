"""
In-memory exchange registry.

Holds the latest snapshot of every known exchange and hands out
point-in-time copies for matching.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from cryptofill.core.exchange import ExchangeInfo
from cryptofill.services.exchange_loader import load_exchange_file
from cryptofill.utils.exceptions import ExchangeNotFoundException

logger = logging.getLogger(__name__)


class ExchangeRegistry:
    """
    Thread-safe store of exchange snapshots keyed by exchange id.

    Exchanges keep the position of their first registration; replacing a
    snapshot does not move it. Snapshots are immutable, so the lists
    returned by ``get_exchanges`` can be used without holding the lock.
    """

    def __init__(self):
        self._exchanges: Dict[str, ExchangeInfo] = {}
        self._lock = threading.Lock()

    def update_exchange(self, exchange: ExchangeInfo) -> None:
        """Insert or replace an exchange snapshot."""
        with self._lock:
            replaced = exchange.exchange_id in self._exchanges
            self._exchanges[exchange.exchange_id] = exchange

        action = "Replaced" if replaced else "Registered"
        logger.info(f"{action} exchange {exchange.exchange_id}")

    def get_exchange(self, exchange_id: str) -> Optional[ExchangeInfo]:
        """Get one exchange snapshot, None if unknown."""
        with self._lock:
            return self._exchanges.get(exchange_id)

    def require_exchange(self, exchange_id: str) -> ExchangeInfo:
        """
        Get one exchange snapshot.

        Raises:
            ExchangeNotFoundException: If the exchange is unknown
        """
        exchange = self.get_exchange(exchange_id)
        if exchange is None:
            raise ExchangeNotFoundException(
                f"Exchange {exchange_id} not found",
                details={"exchange_id": exchange_id}
            )
        return exchange

    def get_exchanges(self, exchange_ids: Optional[Iterable[str]] = None) -> List[ExchangeInfo]:
        """
        Snapshot of the registered exchanges in registration order.

        Args:
            exchange_ids: Restrict to these ids (in registration order)

        Raises:
            ExchangeNotFoundException: If a requested id is unknown
        """
        with self._lock:
            exchanges = list(self._exchanges.values())

        if exchange_ids is None:
            return exchanges

        wanted = set(exchange_ids)
        known = {exchange.exchange_id for exchange in exchanges}
        missing = sorted(wanted - known)
        if missing:
            raise ExchangeNotFoundException(
                f"Exchange {missing[0]} not found",
                details={"exchange_ids": missing}
            )
        return [exchange for exchange in exchanges if exchange.exchange_id in wanted]

    def load_from_files(self, paths: Iterable[Union[str, Path]]) -> List[ExchangeInfo]:
        """Load snapshot files and register each exchange."""
        loaded = []
        for path in paths:
            exchange = load_exchange_file(path)
            self.update_exchange(exchange)
            loaded.append(exchange)
        return loaded

    def clear(self) -> None:
        with self._lock:
            self._exchanges.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._exchanges)

    def __contains__(self, exchange_id: str) -> bool:
        with self._lock:
            return exchange_id in self._exchanges
