"""
Error taxonomy for the place cache.
Only PlaceNotFoundError and FetchFailedError ever reach a caller; the rest are
recovered inside the layer that raises them.
"""


class PlaceCacheError(Exception):
    """Base class for all place cache errors"""

    def __init__(self, message: str, place_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.place_id = place_id


class StorageFailure(PlaceCacheError):
    """Read, write or parse error against the persistent key-value store"""


class ProviderFailure(PlaceCacheError):
    """Live provider unreachable or returned a non-success status"""

    def __init__(self, message: str, place_id: str | None = None, status: str | None = None):
        super().__init__(message, place_id)
        self.status = status


class RemoteStoreFailure(PlaceCacheError):
    """Remote document store unreachable or rejected the operation"""


class PhotoResolutionFailure(PlaceCacheError):
    """A single photo reference could not be turned into a URL"""


class PlaceNotFoundError(PlaceCacheError):
    """Neither the cache, the provider nor the remote store has the place"""


class FetchFailedError(PlaceCacheError):
    """The provider failed and the remote store could not be consulted"""
