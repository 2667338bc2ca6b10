"""
Tests for checkout: order payload, order API client and cart clearing.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests
from pydantic import ValidationError
from cidms_cart.core.exceptions import CheckoutError, EmptyCartError
from cidms_cart.schemas.cart import DeliveryAddress
from cidms_cart.services.cart_store import CartStore
from cidms_cart.services.checkout_service import CheckoutService, build_order_payload
from cidms_cart.services.order_client import OrderApiClient
from cidms_cart.storage.memory_storage import InMemoryCartStorage


@pytest.fixture
def address():
    return DeliveryAddress(street="12 Harbour Road", city="Springfield", state="IL", zip="62701")


@pytest.fixture
def store():
    store = CartStore(InMemoryCartStorage("cart"))
    store.add_item({"product_id": "P1", "name": "Widget", "unit_price": 10, "quantity": 2, "available_stock": 5})
    store.add_item({"product_id": "P2", "name": "Gadget", "unit_price": 2.5, "quantity": 1, "available_stock": 3})
    return store


class TestDeliveryAddress:
    """Test delivery address validation."""

    def test_blank_fields_rejected(self):
        with pytest.raises(ValidationError):
            DeliveryAddress(street="   ", city="Springfield", state="IL", zip="62701")

    def test_country_optional(self, address):
        assert address.country == ""


class TestBuildOrderPayload:
    """Test the order request body built from the cart."""

    def test_payload(self, store, address):
        payload = build_order_payload(store, "cust1", address, payment_method="card", notes="ring twice")

        assert payload["customer"] == "cust1"
        assert payload["items"] == [
            {"product": "P1", "name": "Widget", "quantity": 2, "price": 10.0},
            {"product": "P2", "name": "Gadget", "quantity": 1, "price": 2.5}
        ]
        assert payload["totalAmount"] == 22.5
        assert payload["paymentMethod"] == "card"
        assert payload["deliveryAddress"]["city"] == "Springfield"
        assert payload["notes"] == "ring twice"

    def test_defaults(self, store, address):
        payload = build_order_payload(store, "cust1", address)

        assert payload["paymentMethod"] == "cash"
        assert payload["notes"] == ""


class TestCheckoutService:
    """Test that the cart is cleared only after the order is accepted."""

    def test_successful_checkout_clears_cart(self, store, address):
        order_client = MagicMock()
        order_client.create_order.return_value = {"_id": "order123", "status": "pending"}

        order_id = CheckoutService(store, order_client).checkout("cust1", address)

        assert order_id == "order123"
        assert store.is_empty
        assert store.total_amount == 0
        order_client.create_order.assert_called_once()
        assert order_client.create_order.call_args[0][0]["totalAmount"] == 22.5

    def test_clear_called_exactly_once(self, store, address):
        order_client = MagicMock()
        order_client.create_order.return_value = {"id": 42}

        with patch.object(store, "clear", wraps=store.clear) as clear:
            order_id = CheckoutService(store, order_client).checkout("cust1", address)

        assert order_id == "42"
        clear.assert_called_once_with()

    def test_order_without_id(self, store, address):
        order_client = MagicMock()
        order_client.create_order.return_value = {}

        assert CheckoutService(store, order_client).checkout("cust1", address) is None
        assert store.is_empty

    def test_failed_order_keeps_cart(self, store, address):
        order_client = MagicMock()
        order_client.create_order.side_effect = CheckoutError("Failed to place order: 500")

        with pytest.raises(CheckoutError):
            CheckoutService(store, order_client).checkout("cust1", address)

        assert len(store) == 2
        assert store.total_amount == 22.5

    def test_empty_cart_rejected(self, address):
        order_client = MagicMock()
        store = CartStore(InMemoryCartStorage("cart"))

        with pytest.raises(EmptyCartError):
            CheckoutService(store, order_client).checkout("cust1", address)

        order_client.create_order.assert_not_called()


class TestOrderApiClient:
    """Test the order API client with requests mocked."""

    @patch("cidms_cart.services.order_client.requests.post")
    def test_create_order(self, mock_post):
        mock_response = MagicMock()
        mock_response.json.return_value = {"_id": "order123"}
        mock_post.return_value = mock_response

        client = OrderApiClient(base_url="http://orders.local/api/", token="tok", timeout=5)
        order = client.create_order({"customer": "cust1"})

        assert order == {"_id": "order123"}
        args, kwargs = mock_post.call_args
        assert args[0] == "http://orders.local/api/orders"
        assert kwargs["json"] == {"customer": "cust1"}
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["timeout"] == 5

    @patch("cidms_cart.services.order_client.requests.post")
    def test_no_token_no_authorization_header(self, mock_post):
        mock_post.return_value = MagicMock()
        OrderApiClient(base_url="http://orders.local").create_order({})

        assert "Authorization" not in mock_post.call_args[1]["headers"]

    @patch("cidms_cart.services.order_client.requests.post")
    def test_http_error_raises_checkout_error(self, mock_post):
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError("500 Server Error")
        mock_post.return_value = mock_response

        with pytest.raises(CheckoutError) as exc_info:
            OrderApiClient(base_url="http://orders.local").create_order({})

        assert "500" in exc_info.value.message

    @patch("cidms_cart.services.order_client.requests.post")
    def test_connection_error_raises_checkout_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(CheckoutError):
            OrderApiClient(base_url="http://orders.local").create_order({})

    @patch("cidms_cart.services.order_client.requests.post")
    def test_non_json_body(self, mock_post):
        mock_response = MagicMock()
        mock_response.json.side_effect = ValueError("no json")
        mock_post.return_value = mock_response

        assert OrderApiClient(base_url="http://orders.local").create_order({}) == {}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
