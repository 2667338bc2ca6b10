"""
Persistence collaborator for the cart store.

A storage mirrors one serialized cart under a fixed key. The cart store
treats it as best-effort: failures raised here are logged by the store
and never reach the caller.
"""

from abc import ABC, abstractmethod
from typing import Optional

from cidms_cart.models.cart import CartState


class CartStorage(ABC):
    """Load/save interface for a single persisted cart."""

    def __init__(self, key: str = "cart"):
        self.key = key

    @abstractmethod
    def load(self) -> Optional[CartState]:
        """
        Read the persisted cart.

        Returns:
            The stored cart, or None when nothing is stored under the key

        Raises:
            Any error on unreadable or malformed data
        """

    @abstractmethod
    def save(self, state: CartState) -> None:
        """Overwrite the persisted cart with the given state."""


def serialize_state(state: CartState) -> str:
    """Serialize a cart to its JSON wire layout (camelCase keys)."""
    return state.model_dump_json(by_alias=True)


def deserialize_state(payload: str) -> CartState:
    """Parse a JSON wire payload into a cart."""
    return CartState.model_validate_json(payload)
