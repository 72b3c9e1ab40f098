import logging
from functools import lru_cache

from pymongo import MongoClient
from pymongo.database import Database

from campusvote.config import MONGO_DB, MONGO_URI

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_client() -> MongoClient:
    """Process-wide client; MongoClient is thread-safe and pools connections."""
    if not MONGO_URI:
        raise ValueError("MONGO_URI not set. Check your .env file.")
    client = MongoClient(MONGO_URI, tz_aware=True)
    logger.info(f"MongoDB client created for {MONGO_URI}")
    return client


def get_database(name: str = MONGO_DB) -> Database:
    if not name:
        raise ValueError("MONGO_DB not set. Check your .env file.")
    return get_client()[name]
