import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Union

from cidms_cart.models.cart import CartState
from cidms_cart.storage.base import CartStorage

logger = logging.getLogger(__name__)

# Serializes read-modify-write of storage files across request threads
_file_lock = threading.Lock()


class JsonFileCartStorage(CartStorage):
    """
    Local key-value persistence backed by a single JSON file.

    The file holds one JSON object mapping storage keys to serialized carts,
    so several sessions can share it. Writes go to a unique temp file in the
    same directory and are swapped in with os.replace.
    """

    def __init__(self, path: Union[str, Path], key: str = "cart"):
        super().__init__(key)
        self.path = Path(path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Cart storage file {self.path} does not hold a JSON object")
        return data

    def load(self) -> Optional[CartState]:
        with _file_lock:
            data = self._read_all()
        if self.key not in data:
            return None
        return CartState.model_validate(data[self.key])

    def save(self, state: CartState) -> None:
        record = state.model_dump(mode="json", by_alias=True)

        with _file_lock:
            try:
                data = self._read_all()
            except ValueError:
                # Unreadable file: start over rather than never saving again
                logger.warning(f"Discarding unreadable cart storage file {self.path}")
                data = {}

            data[self.key] = record

            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False
            ) as f:
                json.dump(data, f)
                tmp_name = f.name

            try:
                os.replace(tmp_name, self.path)
            except OSError:
                os.unlink(tmp_name)
                raise
