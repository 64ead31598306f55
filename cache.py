"""Device-style local cache: string blobs under string keys, kept in one JSON file."""
import json
import logging
import os
import tempfile
import threading
from typing import Dict, Optional

from errors import CacheUnavailable

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = os.getenv("PROGRESS_CACHE_PATH", os.path.join(".cache", "progress_cache.json"))


class LocalCache:
    def __init__(self, path: str = DEFAULT_CACHE_PATH):
        self.path = path
        # one writer at a time: set_item rewrites the whole file
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        if not os.path.isfile(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise CacheUnavailable(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CacheUnavailable(f"{self.path} does not hold a key/value object")
        return data

    def _dump(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise CacheUnavailable(f"cannot write {self.path}: {exc}") from exc

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._load()
            except CacheUnavailable as exc:
                logger.warning("Discarding unreadable cache, rewriting it: %s", exc)
                data = {}
            data[key] = value
            self._dump(data)
        logger.debug("Cached %s (%d bytes)", key, len(value))

