"""
MongoDB bootstrap.

``db`` is None when DATABASE_URL is not set; callers must handle that case.
"""
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from config import DATABASE_URL, DATABASE_NAME, DATABASE_TIMEOUT_MS
from logger import get_logger

logger = get_logger(__name__)

client: Optional[MongoClient] = None
db: Optional[Database] = None


def create_client(url: str, timeout_ms: int = DATABASE_TIMEOUT_MS) -> MongoClient:
    # Connects lazily; an unreachable server costs at most timeout_ms per operation
    return MongoClient(url, serverSelectionTimeoutMS=timeout_ms)


if DATABASE_URL:
    client = create_client(DATABASE_URL)
    db = client[DATABASE_NAME]
    logger.info(f"Using MongoDB database '{DATABASE_NAME}'")
else:
    logger.warning("DATABASE_URL is not set; storage is unavailable")


def get_collection(name: str) -> Optional[Collection]:
    if db is None:
        return None
    return db[name]
