"""
Two-tier progress storage.

The remote tier is the `users` collection in MongoDB; the local tier is the
device-style cache. TieredStorage reads from the first tier that answers and
writes to both.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from cache import LocalCache
from errors import CacheUnavailable, RemoteUnavailable, StorageError, StorageUnavailable

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class RemoteProgressTier:
    name = "remote"

    def __init__(self, collection: Optional[Collection]):
        self.collection = collection

    def _require_collection(self) -> Collection:
        if self.collection is None:
            raise RemoteUnavailable("database not initialized")
        return self.collection

    def get(self, user_id: str) -> Optional[Record]:
        collection = self._require_collection()
        try:
            doc = collection.find_one({"_id": user_id}, {"progress": 1})
        except PyMongoError as exc:
            raise RemoteUnavailable(str(exc)) from exc
        if doc is None:
            return None
        return doc.get("progress") or {}

    def set(self, user_id: str, record: Record) -> None:
        collection = self._require_collection()
        now = datetime.now(timezone.utc)
        try:
            collection.update_one(
                {"_id": user_id},
                {"$set": {"progress": record, "updated_at": now}, "$setOnInsert": {"created_at": now}},
                upsert=True,
            )
        except PyMongoError as exc:
            raise RemoteUnavailable(str(exc)) from exc


class CacheProgressTier:
    name = "cache"
    key_prefix = "progress_"

    def __init__(self, cache: LocalCache):
        self.cache = cache

    def get(self, user_id: str) -> Optional[Record]:
        blob = self.cache.get_item(self.key_prefix + user_id)
        if blob is None:
            return None
        try:
            return json.loads(blob)
        except json.JSONDecodeError as exc:
            raise CacheUnavailable(f"corrupt cache entry for {user_id}") from exc

    def set(self, user_id: str, record: Record) -> None:
        self.cache.set_item(self.key_prefix + user_id, json.dumps(record, ensure_ascii=False))


class TieredStorage:
    def __init__(self, primary, secondary):
        self.primary = primary
        self.secondary = secondary

    def get(self, key: str) -> Tuple[Optional[Record], str]:
        """Return the record and the name of the tier that answered."""
        try:
            value = self.primary.get(key)
        except StorageError as exc:
            logger.warning("%s read failed for %s, using %s: %s", self.primary.name, key, self.secondary.name, exc)
        else:
            if value is not None:
                self._refresh_secondary(key, value)
            return value, self.primary.name

        try:
            return self.secondary.get(key), self.secondary.name
        except StorageError as exc:
            raise StorageUnavailable(f"no storage tier could read {key}") from exc

    def set(self, key: str, value: Record) -> bool:
        stored = False
        for tier in (self.primary, self.secondary):
            try:
                tier.set(key, value)
                stored = True
            except StorageError as exc:
                logger.warning("%s write failed for %s: %s", tier.name, key, exc)
        return stored

    def _refresh_secondary(self, key: str, value: Record) -> None:
        try:
            self.secondary.set(key, value)
        except StorageError as exc:
            logger.warning("could not refresh %s for %s: %s", self.secondary.name, key, exc)
