from typing import Dict, Optional

from cidms_cart.models.cart import CartState
from cidms_cart.storage.base import CartStorage, serialize_state, deserialize_state


class InMemoryCartStorage(CartStorage):
    """
    Keeps serialized carts in a dict, the way a browser keeps them in localStorage.

    Several storages may share one backing dict; each reads and writes only its key.
    """

    def __init__(self, key: str = "cart", backing: Optional[Dict[str, str]] = None):
        super().__init__(key)
        self.backing = backing if backing is not None else {}

    def load(self) -> Optional[CartState]:
        payload = self.backing.get(self.key)
        if payload is None:
            return None
        return deserialize_state(payload)

    def save(self, state: CartState) -> None:
        self.backing[self.key] = serialize_state(state)
