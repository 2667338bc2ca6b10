"""
Client for the external order REST API.
"""

import logging
from typing import Any, Dict, Optional

import requests

from cidms_cart.core.config import settings
from cidms_cart.core.exceptions import CheckoutError

logger = logging.getLogger(__name__)


class OrderApiClient:
    """Posts orders to the backend order API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[int] = None
    ):
        self.base_url = (base_url or settings.ORDER_API_BASE_URL).rstrip("/")
        self.token = token
        self.timeout = timeout or settings.ORDER_API_TIMEOUT_SECONDS

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create an order.

        Args:
            payload: Order request body

        Returns:
            The created order as returned by the API

        Raises:
            CheckoutError: If the API is unreachable or rejects the order
        """
        url = f"{self.base_url}/orders"
        logger.info(f"Submitting order for customer {payload.get('customer')} to {url}")

        try:
            response = requests.post(
                url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Order API request failed: {str(e)}")
            raise CheckoutError(f"Failed to place order: {str(e)}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        return data if isinstance(data, dict) else {}
