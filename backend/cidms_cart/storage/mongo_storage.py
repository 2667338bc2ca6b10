from typing import Optional

from pymongo.collection import Collection

from cidms_cart.models.cart import CartState
from cidms_cart.storage.base import CartStorage


class MongoCartStorage(CartStorage):
    """Persists each cart as one MongoDB document whose _id is the storage key."""

    def __init__(self, collection: Collection, key: str = "cart"):
        super().__init__(key)
        self.collection = collection

    def load(self) -> Optional[CartState]:
        document = self.collection.find_one({"_id": self.key})
        if not document:
            return None
        document.pop("_id", None)
        return CartState.model_validate(document)

    def save(self, state: CartState) -> None:
        document = state.model_dump(mode="json", by_alias=True)
        document["_id"] = self.key
        self.collection.replace_one({"_id": self.key}, document, upsert=True)
