"""
Cache codec for place details.
Turns CacheEntry objects into strings for the storage adapter and back, and
owns the namespace version marker. Nothing here raises to the caller: every
storage or parse problem is logged and reported as a miss or a failed write.
"""
import logging
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from placecache.core.config import Settings, settings as default_settings
from placecache.core.errors import StorageFailure
from placecache.core.logger import logs
from placecache.models.places_model import CacheEntry, CacheInfo, PlaceRecord
from placecache.repos.storage_adapter import BaseStorageAdapter


class PlaceCacheCodec:
    def __init__(
        self,
        storage: BaseStorageAdapter,
        config: Optional[Settings] = None,
        clock: Callable[[], float] = time.time
    ):
        self.storage = storage
        self.config = config or default_settings
        self.clock = clock
        self.prefix = self.config.CACHE_PREFIX
        self.version_key = self.config.CACHE_VERSION_KEY
        self.version = self.config.CACHE_VERSION

    def _entry_key(self, place_id: str) -> str:
        return f"{self.prefix}{place_id}"

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def _ensure_version(self) -> bool:
        """
        Purges the namespace when the stored marker differs from the running version.
        Returns True if the namespace was already current.
        """
        stored = self.storage.read(self.version_key)
        if stored == self.version:
            return True

        removed = self.storage.remove_all(lambda key: key.startswith(self.prefix))
        self.storage.write(self.version_key, self.version)
        logs.log(
            logging.INFO,
            f"Cache version changed ({stored} -> {self.version}), purged {removed} place entries"
        )
        return False

    # ===== Entry Methods =====

    def get(self, place_id: str) -> Optional[CacheEntry]:
        """Return the cached entry for place_id, or None on miss, purge or any failure."""
        try:
            if not self._ensure_version():
                return None

            raw = self.storage.read(self._entry_key(place_id))
            if raw is None:
                return None

            return CacheEntry.model_validate_json(raw)
        except (StorageFailure, ValidationError, ValueError) as e:
            logs.log(logging.WARNING, f"Failed to read cached place {place_id}: {str(e)}")
            return None

    def set(self, place_id: str, data: PlaceRecord, photo_urls: List[str]) -> bool:
        """Replace the entry for place_id. Returns whether the write succeeded."""
        try:
            self._ensure_version()
            entry = CacheEntry(
                place_id=place_id,
                data=data,
                timestamp=self._now_ms(),
                photo_urls=list(photo_urls)
            )
            self.storage.write(self._entry_key(place_id), entry.model_dump_json())
            return True
        except (StorageFailure, ValidationError, ValueError) as e:
            logs.log(logging.WARNING, f"Failed to cache place {place_id}: {str(e)}")
            return False

    # ===== Cache Management =====

    def clear_place(self, place_id: str) -> bool:
        """Evict a single place."""
        try:
            self.storage.remove(self._entry_key(place_id))
            logs.log(logging.INFO, f"Cache cleared for place: {place_id}")
            return True
        except StorageFailure as e:
            logs.log(logging.ERROR, f"Failed to clear cache for place {place_id}: {str(e)}")
            return False

    def clear_all(self) -> bool:
        """Evict every place and forget the version marker."""
        try:
            count = self.storage.remove_all(lambda key: key.startswith(self.prefix))
            self.storage.remove(self.version_key)
            logs.log(logging.INFO, f"Cleared {count} place caches")
            return True
        except StorageFailure as e:
            logs.log(logging.ERROR, f"Failed to clear all place caches: {str(e)}")
            return False

    def estimate_size(self) -> int:
        """Approximate bytes held by the namespace, counting two bytes per character."""
        try:
            total = 0
            for key in self.storage.keys():
                if key.startswith(self.prefix) or key == self.version_key:
                    value = self.storage.read(key)
                    if value:
                        total += len(value) * 2
            return total
        except StorageFailure as e:
            logs.log(logging.ERROR, f"Failed to estimate cache size: {str(e)}")
            return 0

    def cache_info(self) -> CacheInfo:
        try:
            count = sum(1 for key in self.storage.keys() if key.startswith(self.prefix))
            return CacheInfo(
                entry_count=count,
                cache_version=self.storage.read(self.version_key),
                estimated_size_bytes=self.estimate_size()
            )
        except StorageFailure as e:
            logs.log(logging.ERROR, f"Failed to get cache info: {str(e)}")
            return CacheInfo()
