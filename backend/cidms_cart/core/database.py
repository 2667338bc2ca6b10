import logging

from pymongo import MongoClient
from pymongo.collection import Collection

from cidms_cart.core.config import settings

logger = logging.getLogger(__name__)

# Global MongoDB client, created lazily on first use
_client: MongoClient = None


def get_mongo_client() -> MongoClient:
    """Get (and connect on first call) the MongoDB client."""
    global _client
    if _client is None:
        _client = MongoClient(settings.MONGODB_URI)
        logger.info(f"Connected to MongoDB: {settings.MONGODB_DB_NAME}")
    return _client


def get_carts_collection() -> Collection:
    """Get the collection holding persisted carts."""
    client = get_mongo_client()
    return client[settings.MONGODB_DB_NAME][settings.MONGODB_CARTS_COLLECTION]


def close_mongo_connection():
    """Close MongoDB connection."""
    global _client
    if _client:
        _client.close()
        _client = None
        logger.info("Closed MongoDB connection")
