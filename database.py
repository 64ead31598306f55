"""
MongoDB connection for the progress backend.

DATABASE_URL and DATABASE_NAME select the deployment. When either is missing
`db` stays None and the progress store runs on its local cache alone.
"""
import os
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")
DATABASE_TIMEOUT_MS = int(os.getenv("DATABASE_TIMEOUT_MS", "3000"))

_client: Optional[MongoClient] = None
db = None

if DATABASE_URL and DATABASE_NAME:
    # MongoClient connects lazily, so an unreachable server only surfaces on the first query
    _client = MongoClient(DATABASE_URL, serverSelectionTimeoutMS=DATABASE_TIMEOUT_MS)
    db = _client[DATABASE_NAME]


def get_collection(name: str) -> Optional[Collection]:
    if db is None:
        return None
    return db[name]
