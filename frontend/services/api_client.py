"""
API Client Service for FastAPI Backend Communication

Handles all REST API requests with retry logic and error handling.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


class APIError(Exception):
    """Raised when the backend rejects a request or returns garbage."""


class APIClient:
    """Client for communicating with the fulfillment backend via REST API."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: int = 5):
        """Initialize API client."""
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry logic."""
        session = requests.Session()

        # Order submission is not idempotent from the caller's view, so only reads retry
        retry_strategy = Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=10, pool_maxsize=20)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _handle_response(self, response: requests.Response) -> Any:
        """Handle API response and extract data or errors."""
        try:
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            try:
                error_data = response.json()
                error_msg = error_data.get("detail") or error_data.get("message") or str(e)
            except ValueError:
                error_msg = str(e)
            raise APIError(f"API Error: {error_msg}") from e
        except requests.exceptions.JSONDecodeError as e:
            raise APIError("Invalid response from server") from e

    def health(self) -> Dict[str, Any]:
        """Get the health payload, including order statistics."""
        response = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        return self._handle_response(response)

    def health_check(self) -> bool:
        """Check if backend is healthy."""
        try:
            return self.health().get("status") == "healthy"
        except (requests.exceptions.RequestException, APIError) as e:
            self.logger.debug(f"Health check failed: {e}")
            return False

    def submit_order(
        self,
        side: str,
        quantity: Any,
        price: Any,
        exchange_ids: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Submit an order for fulfillment.

        Quantities and prices are sent as strings so no precision is lost.
        Example: submit_order("buy", "1.5", "57300", exchange_ids=["exchange-01"])
        """
        payload: Dict[str, Any] = {
            "side": str(side).lower(),
            "quantity": str(quantity),
            "price": str(price),
        }
        if exchange_ids:
            payload["exchange_ids"] = list(exchange_ids)

        response = self.session.post(f"{self.base_url}/api/v1/orders", json=payload, timeout=self.timeout)
        return self._handle_response(response)

    def get_exchanges(self) -> List[Dict[str, Any]]:
        """List exchange snapshots."""
        response = self.session.get(f"{self.base_url}/api/v1/exchanges", timeout=self.timeout)
        return self._handle_response(response)

    def get_exchange(self, exchange_id: str) -> Dict[str, Any]:
        """Get one exchange snapshot."""
        response = self.session.get(f"{self.base_url}/api/v1/exchanges/{exchange_id}", timeout=self.timeout)
        return self._handle_response(response)

    def get_statistics(self) -> Dict[str, Any]:
        """Get order service statistics."""
        try:
            return self.health().get("order_service", {})
        except (requests.exceptions.RequestException, APIError) as e:
            self.logger.debug(f"Statistics unavailable: {e}")
            return {}

    def close(self):
        """Close the session."""
        if self.session:
            self.session.close()


_client_instance: Optional[APIClient] = None


def get_api_client(base_url: str = "http://localhost:8000") -> APIClient:
    """Get or create singleton API client instance."""
    global _client_instance
    if _client_instance is None or _client_instance.base_url != base_url.rstrip('/'):
        _client_instance = APIClient(base_url)
    return _client_instance
