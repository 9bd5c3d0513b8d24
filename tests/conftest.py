"""Shared fixtures: a controllable clock, fake provider and fake remote store.

No network or database access; every collaborator of the fetch layer is faked.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from placecache.core.background import BackgroundTaskScheduler
from placecache.core.config import Settings
from placecache.core.errors import PhotoResolutionFailure, ProviderFailure, RemoteStoreFailure
from placecache.repos.base_repo import BasePlacesStore
from placecache.repos.cache_codec import PlaceCacheCodec
from placecache.repos.storage_adapter import InMemoryStorageAdapter
from placecache.services.place_details_service import PlaceDetailsService
from placecache.services.places_provider import BasePlacesProvider, ProviderResult
from placecache.services.remote_sync import RemoteSyncWriter

HOUR = 60 * 60
DAY = 24 * HOUR
T0 = 1_700_000_000.0


class FakeClock:
    def __init__(self, start: float = T0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider(BasePlacesProvider):
    """Returns canned results per place id and records every call."""

    def __init__(self, calls: Optional[list] = None):
        self.results: dict[str, ProviderResult] = {}
        self.fail_with: Optional[Exception] = None
        self.bad_photo_sizes: dict[str, set] = {}
        self.calls = calls if calls is not None else []
        self.photo_calls: list[tuple] = []

    def add_place(self, place_id: str, **result) -> None:
        result.setdefault("place_id", place_id)
        self.results[place_id] = ProviderResult(status="OK", result=result)

    async def get_details(self, place_id: str, fields: list[str]) -> ProviderResult:
        self.calls.append(("provider", place_id))
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        return self.results.get(place_id, ProviderResult(status="NOT_FOUND"))

    async def resolve_photo_url(self, reference, max_width=None, max_height=None) -> str:
        self.photo_calls.append((reference, max_width, max_height))
        if max_width in self.bad_photo_sizes.get(reference, set()):
            raise PhotoResolutionFailure(f"no url for {reference} at {max_width}")
        return f"https://photos.example/{reference}?w={max_width}"

    def get_provider_name(self) -> str:
        return "Fake"


class FakeStore(BasePlacesStore):
    def __init__(self, calls: Optional[list] = None):
        self.documents: dict[str, dict] = {}
        self.upserts: list[tuple[str, dict]] = []
        self.fail_reads = False
        self.fail_writes = False
        self.calls = calls if calls is not None else []

    async def get_place(self, place_id: str) -> Optional[dict]:
        self.calls.append(("store", place_id))
        if self.fail_reads:
            raise RemoteStoreFailure("store down", place_id)
        return self.documents.get(place_id)

    async def upsert_place(self, place_id: str, record: dict) -> None:
        if self.fail_writes:
            raise RemoteStoreFailure("store down", place_id)
        self.upserts.append((place_id, record))
        self.documents[place_id] = record


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        CACHE_VERSION="1.0",
        AGING_REFRESH_DELAY_SECONDS=0,
        PHOTO_REFRESH_DELAY_SECONDS=0,
        GOOGLE_MAPS_API_KEY="test-key",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> InMemoryStorageAdapter:
    return InMemoryStorageAdapter()


@pytest.fixture
def codec(storage, test_settings, clock) -> PlaceCacheCodec:
    return PlaceCacheCodec(storage, test_settings, clock=clock)


@pytest.fixture
def call_log() -> list:
    return []


@pytest.fixture
def provider(call_log) -> FakeProvider:
    return FakeProvider(call_log)


@pytest.fixture
def store(call_log) -> FakeStore:
    return FakeStore(call_log)


@pytest.fixture
def scheduler() -> BackgroundTaskScheduler:
    return BackgroundTaskScheduler()


@pytest.fixture
def service(codec, provider, store, scheduler, test_settings, clock) -> PlaceDetailsService:
    return PlaceDetailsService(
        cache=codec,
        provider=provider,
        store=store,
        sync_writer=RemoteSyncWriter(store, scheduler),
        scheduler=scheduler,
        config=test_settings,
        clock=clock,
    )
