"""Storage errors raised by the progress tiers and recovered inside the store."""


class StorageError(Exception):
    """Base class for progress storage failures."""


class RemoteUnavailable(StorageError):
    """The remote document store could not be reached or rejected the call."""


class CacheUnavailable(StorageError):
    """The local cache could not be read or written."""


class StorageUnavailable(StorageError):
    """Every storage tier failed for a read."""
