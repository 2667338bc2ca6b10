from fastapi import Depends, Header

from cidms_cart.services.cart_store import CartStore
from cidms_cart.services.order_client import OrderApiClient
from cidms_cart.storage.factory import build_storage, session_storage_key


async def get_session_id(x_cart_session: str = Header(..., min_length=1)) -> str:
    """Dependency to get the cart session identifier from the X-Cart-Session header."""
    return x_cart_session


def get_cart_store(session_id: str = Depends(get_session_id)) -> CartStore:
    """
    Dependency to get the cart store for the current session.

    The store is built per request and rehydrated from the configured storage,
    so a session always sees its last persisted cart.
    """
    storage = build_storage(session_storage_key(session_id))
    return CartStore(storage)


def get_order_client() -> OrderApiClient:
    """Dependency to get the order API client."""
    return OrderApiClient()
