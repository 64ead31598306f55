from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from cache import LocalCache
from errors import CacheUnavailable
from progress import ProgressStore
from storage import CacheProgressTier, RemoteProgressTier, TieredStorage


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class DownCollection:
    """Collection whose server never answers."""

    def find_one(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers available")

    def update_one(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers available")


class DownCache:
    def get_item(self, key):
        raise CacheUnavailable("storage full")

    def set_item(self, key, value):
        raise CacheUnavailable("storage full")


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def users():
    return mongomock.MongoClient().lingo.users


@pytest.fixture
def local_cache(tmp_path):
    return LocalCache(str(tmp_path / "progress_cache.json"))


@pytest.fixture
def make_store(clock, users, local_cache):
    def _make(collection=users, local=local_cache):
        storage = TieredStorage(RemoteProgressTier(collection), CacheProgressTier(local))
        return ProgressStore(storage, clock=clock)
    return _make


@pytest.fixture
def store(make_store):
    return make_store()
