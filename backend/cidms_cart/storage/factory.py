import logging
import os
from typing import Dict

from cidms_cart.core.config import Settings, settings as default_settings
from cidms_cart.core.database import get_carts_collection, get_mongo_client
from cidms_cart.storage.base import CartStorage
from cidms_cart.storage.file_storage import JsonFileCartStorage
from cidms_cart.storage.memory_storage import InMemoryCartStorage
from cidms_cart.storage.mongo_storage import MongoCartStorage

logger = logging.getLogger(__name__)

# Process-wide backing for the "memory" backend, shared across sessions
_memory_backing: Dict[str, str] = {}

STORAGE_BACKENDS = ["memory", "file", "mongodb"]


def build_storage(key: str, settings: Settings = default_settings) -> CartStorage:
    """
    Build the storage configured by CART_STORAGE_BACKEND for the given key.

    Raises:
        ValueError: If the configured backend is unknown
    """
    backend = settings.CART_STORAGE_BACKEND.lower()

    if backend == "memory":
        return InMemoryCartStorage(key, backing=_memory_backing)
    if backend == "file":
        return JsonFileCartStorage(settings.CART_STORAGE_PATH, key)
    if backend == "mongodb":
        return MongoCartStorage(get_carts_collection(), key)

    raise ValueError(
        f"Unknown cart storage backend '{settings.CART_STORAGE_BACKEND}'. "
        f"Expected one of: {', '.join(STORAGE_BACKENDS)}"
    )


def session_storage_key(session_id: str, settings: Settings = default_settings) -> str:
    """Storage key for a session's cart."""
    return f"{settings.CART_STORAGE_KEY}:{session_id}"


def check_storage(settings: Settings = default_settings) -> str:
    """
    Verify the configured cart storage is usable before serving requests.

    Returns:
        The backend name

    Raises:
        ValueError: If the configured backend is unknown
        PermissionError: If the file backend's directory is not writable
        pymongo.errors.PyMongoError: If MongoDB does not answer a ping
    """
    backend = settings.CART_STORAGE_BACKEND.lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(
            f"Unknown cart storage backend '{settings.CART_STORAGE_BACKEND}'. "
            f"Expected one of: {', '.join(STORAGE_BACKENDS)}"
        )

    if backend == "file":
        directory = os.path.dirname(os.path.abspath(settings.CART_STORAGE_PATH))
        os.makedirs(directory, exist_ok=True)
        if not os.access(directory, os.W_OK):
            raise PermissionError(f"Cart storage directory {directory} is not writable")
    elif backend == "mongodb":
        get_mongo_client().admin.command("ping")

    logger.info(f"Cart storage backend '{backend}' is ready")
    return backend
