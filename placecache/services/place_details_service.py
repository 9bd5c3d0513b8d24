import logging
import time
from typing import Callable, Dict, List, Optional, Set

from pydantic import ValidationError

from placecache.core.background import BackgroundTaskScheduler
from placecache.core.config import Settings, settings as default_settings
from placecache.core.errors import FetchFailedError, PlaceNotFoundError, ProviderFailure
from placecache.core.logger import logs
from placecache.models.places_model import CacheEntry, PlaceRecord
from placecache.repos.base_repo import BasePlacesStore
from placecache.repos.cache_codec import PlaceCacheCodec
from placecache.services import freshness
from placecache.services.place_parsing import build_place_record, resolve_photo_urls
from placecache.services.places_provider import DETAIL_FIELDS, BasePlacesProvider
from placecache.services.remote_sync import RemoteSyncWriter


class PlaceDetailsService:
    """
    Serves place details from the local cache, the live provider or the remote
    store, in that order, and keeps the cache and remote store refreshed.
    """

    def __init__(
        self,
        cache: PlaceCacheCodec,
        provider: BasePlacesProvider,
        store: BasePlacesStore,
        sync_writer: RemoteSyncWriter,
        scheduler: BackgroundTaskScheduler,
        config: Optional[Settings] = None,
        clock: Callable[[], float] = time.time
    ):
        self.cache = cache
        self.provider = provider
        self.store = store
        self.sync_writer = sync_writer
        self.scheduler = scheduler
        self.config = config or default_settings
        self.clock = clock
        # Background refresh bookkeeping: ids with a refresh queued or running,
        # and recent attempt times (epoch seconds) per id
        self._refreshing: Set[str] = set()
        self._refresh_attempts: Dict[str, List[float]] = {}

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    async def fetch_place_details(self, place_id: str, force_refresh: bool = False) -> PlaceRecord:
        # 1. Check Cache
        if not force_refresh:
            entry = self.cache.get(place_id)
            if entry is not None:
                now = self._now_ms()
                if not freshness.is_data_stale(entry, now, self.config):
                    if not freshness.should_refresh_photos(entry.data, now, self.config):
                        logs.log(logging.INFO, "✓ Place cache HIT", place_id=place_id)
                        if freshness.is_aging(entry, now, self.config):
                            self._schedule_refresh(
                                place_id, self.config.AGING_REFRESH_DELAY_SECONDS, "aging"
                            )
                        return self._record_from_entry(entry)

                    # Data is still good, only the photo links need repairing
                    logs.log(logging.INFO, "✓ Place cache HIT, photos due for refresh", place_id=place_id)
                    self._schedule_refresh(
                        place_id, self.config.PHOTO_REFRESH_DELAY_SECONDS, "photos"
                    )
                    return self._record_from_entry(entry)

                logs.log(logging.INFO, "Place cache entry is stale", place_id=place_id)
            else:
                logs.log(logging.INFO, "✗ Place cache MISS", place_id=place_id)
        else:
            logs.log(logging.INFO, "Force refreshing", place_id=place_id)

        # 2. Live provider, then the remote store as a fallback
        try:
            record = await self._fetch_from_provider(place_id)
        except ProviderFailure as e:
            logs.log(logging.WARNING, f"Provider failed ({e.message}), trying remote store", place_id=place_id)
            return await self._fetch_from_remote_store(place_id)

        self.sync_writer.sync_to_remote_store(place_id, record)
        return record

    def should_refresh_photos(self, place_id: str, record: Optional[PlaceRecord] = None) -> bool:
        """Whether the photo URLs for place_id (or the given record) may have expired."""
        if record is None:
            entry = self.cache.get(place_id)
            record = entry.data if entry else None
        return freshness.should_refresh_photos(record, self._now_ms(), self.config)

    def _can_refresh(self, place_id: str, now: float) -> bool:
        """At most MAX_REFRESHES_PER_HOUR attempts per place, MIN_REFRESH_INTERVAL_SECONDS apart."""
        attempts = [t for t in self._refresh_attempts.get(place_id, []) if now - t < 60 * 60]
        self._refresh_attempts[place_id] = attempts

        if len(attempts) >= self.config.MAX_REFRESHES_PER_HOUR:
            logs.log(logging.INFO, "Refresh throttled, hourly limit reached", place_id=place_id)
            return False
        if attempts and now - attempts[-1] < self.config.MIN_REFRESH_INTERVAL_SECONDS:
            logs.log(logging.DEBUG, "Refresh throttled, last attempt too recent", place_id=place_id)
            return False
        return True

    def _schedule_refresh(self, place_id: str, delay: float, reason: str):
        if place_id in self._refreshing:
            logs.log(logging.DEBUG, f"Skipping {reason} refresh, one is already pending", place_id=place_id)
            return

        now = self.clock()
        if not self._can_refresh(place_id, now):
            return

        self._refresh_attempts[place_id].append(now)
        self._refreshing.add(place_id)

        async def _refresh():
            try:
                await self.fetch_place_details(place_id, force_refresh=True)
            finally:
                self._refreshing.discard(place_id)

        logs.log(logging.INFO, f"Scheduling {reason} refresh in {delay}s", place_id=place_id)
        self.scheduler.schedule(_refresh, delay=delay, name=f"{reason}-refresh:{place_id}")

    def _record_from_entry(self, entry: CacheEntry) -> PlaceRecord:
        return entry.data.model_copy(update={"photo_urls": list(entry.photo_urls)})

    async def _fetch_from_provider(self, place_id: str) -> PlaceRecord:
        try:
            result = await self.provider.get_details(place_id, DETAIL_FIELDS)
        except ProviderFailure:
            raise
        except Exception as e:
            raise ProviderFailure(f"{self.provider.get_provider_name()} error: {str(e)}", place_id) from e

        if not result.ok:
            raise ProviderFailure(
                f"{self.provider.get_provider_name()} returned {result.status}",
                place_id,
                status=result.status
            )

        record = build_place_record(place_id, result.result, self._now_ms())
        photo_urls = await resolve_photo_urls(
            self.provider, record.photo_references, self.config.MAX_PHOTOS
        )
        record.photo_urls = photo_urls

        if not self.cache.set(place_id, record, photo_urls):
            logs.log(logging.WARNING, f"Could not cache place {place_id}, serving uncached")

        logs.log(logging.INFO, f"Fetched from provider with {len(photo_urls)} photos", place_id=place_id)
        return record

    async def _fetch_from_remote_store(self, place_id: str) -> PlaceRecord:
        try:
            document = await self.store.get_place(place_id)
        except Exception as e:
            logs.log(logging.ERROR, f"Remote store lookup failed for {place_id}: {str(e)}")
            raise FetchFailedError(f"Could not fetch place {place_id}", place_id) from e

        if not document:
            raise PlaceNotFoundError(f"Place {place_id} not found", place_id)

        try:
            record = PlaceRecord.model_validate({**document, "place_id": place_id})
        except ValidationError as e:
            logs.log(logging.ERROR, f"Remote store returned an invalid record for {place_id}: {str(e)}")
            raise FetchFailedError(f"Could not fetch place {place_id}", place_id) from e

        self.cache.set(place_id, record, record.photo_urls)
        logs.log(logging.INFO, "Served from remote store", place_id=place_id)
        return record
