import logging
from typing import Any, Dict, Optional

from cidms_cart.core.exceptions import EmptyCartError
from cidms_cart.schemas.cart import DeliveryAddress
from cidms_cart.services.cart_store import CartStore
from cidms_cart.services.order_client import OrderApiClient

logger = logging.getLogger(__name__)


def build_order_payload(
    cart: CartStore,
    customer_id: str,
    delivery_address: DeliveryAddress,
    payment_method: str = "cash",
    notes: str = ""
) -> Dict[str, Any]:
    """Build the order API request body from the cart contents."""
    return {
        "customer": customer_id,
        "items": [
            {
                "product": line.product_id,
                "name": line.name,
                "quantity": line.quantity,
                "price": line.unit_price
            }
            for line in cart.items
        ],
        "totalAmount": cart.total_amount,
        "paymentMethod": payment_method,
        "deliveryAddress": delivery_address.model_dump(),
        "notes": notes
    }


class CheckoutService:
    """
    Places an order for a session's cart.

    The cart is cleared exactly once, and only after the order API
    accepted the order. A failed submission leaves the cart untouched.
    """

    def __init__(self, store: CartStore, order_client: OrderApiClient):
        self.store = store
        self.order_client = order_client

    def checkout(
        self,
        customer_id: str,
        delivery_address: DeliveryAddress,
        payment_method: str = "cash",
        notes: str = ""
    ) -> Optional[str]:
        """
        Submit the cart as an order.

        Returns:
            The created order id, if the API reported one

        Raises:
            EmptyCartError: If the cart has no lines
            CheckoutError: If the order API rejected the order
        """
        if self.store.is_empty:
            raise EmptyCartError()

        payload = build_order_payload(
            self.store,
            customer_id,
            delivery_address,
            payment_method=payment_method,
            notes=notes
        )
        order = self.order_client.create_order(payload)

        self.store.clear()

        order_id = order.get("_id") or order.get("id")
        logger.info(f"Order {order_id} placed for customer {customer_id}, cart cleared")
        return str(order_id) if order_id is not None else None
