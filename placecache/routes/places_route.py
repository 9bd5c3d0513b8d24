import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException

from placecache.core.background import BackgroundTaskScheduler
from placecache.core.config import settings
from placecache.core.db_connection import get_db
from placecache.core.errors import FetchFailedError, PlaceNotFoundError
from placecache.core.logger import logs
from placecache.models.places_model import (
    CacheInfo,
    ExtractPlaceIdRequest,
    ExtractPlaceIdResponse,
    PhotoFreshnessRequest,
    PhotoFreshnessResponse,
    PlaceRecord,
)
from placecache.repos.base_repo import BasePlacesStore
from placecache.repos.cache_codec import PlaceCacheCodec
from placecache.repos.local_repo import LocalPlacesRepository
from placecache.repos.places_repo import PlacesRepository
from placecache.repos.storage_adapter import FileStorageAdapter
from placecache.services.place_details_service import PlaceDetailsService
from placecache.services.places_provider import GooglePlacesProvider
from placecache.services.remote_sync import RemoteSyncWriter
from placecache.utils.place_id import extract_place_id

router = APIRouter()

# --- Dependency Injection Helpers ---
def get_places_store() -> BasePlacesStore:
    """Get the remote place store based on storage mode."""
    if settings.STORAGE_MODE == "local":
        return LocalPlacesRepository(settings.LOCAL_STORE_DIR)
    return PlacesRepository(get_db(), settings.PLACES_COLLECTION)

@lru_cache(maxsize=1)
def get_scheduler() -> BackgroundTaskScheduler:
    return BackgroundTaskScheduler()

@lru_cache(maxsize=1)
def get_place_details_service() -> PlaceDetailsService:
    """One service per process so background tasks share a scheduler."""
    store = get_places_store()
    scheduler = get_scheduler()
    return PlaceDetailsService(
        cache=PlaceCacheCodec(FileStorageAdapter(settings.CACHE_DIR), settings),
        provider=GooglePlacesProvider(settings),
        store=store,
        sync_writer=RemoteSyncWriter(store, scheduler),
        scheduler=scheduler,
        config=settings
    )

# --- Endpoints ---
@router.get("/places/{place_id}", response_model=PlaceRecord)
async def get_place_details_endpoint(
    place_id: str,
    force_refresh: bool = False,
    service: PlaceDetailsService = Depends(get_place_details_service)
):
    try:
        return await service.fetch_place_details(place_id, force_refresh=force_refresh)
    except PlaceNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except FetchFailedError as e:
        logs.log(logging.ERROR, f"Error in get_place_details_endpoint: {e.message}")
        raise HTTPException(status_code=502, detail=e.message)

@router.post("/places/photos/stale", response_model=PhotoFreshnessResponse)
async def photos_stale_endpoint(
    request: PhotoFreshnessRequest,
    service: PlaceDetailsService = Depends(get_place_details_service)
):
    should_refresh = service.should_refresh_photos(request.place_id, request.record)
    return PhotoFreshnessResponse(place_id=request.place_id, should_refresh=should_refresh)

@router.post("/places/extract-id", response_model=ExtractPlaceIdResponse)
async def extract_place_id_endpoint(request: ExtractPlaceIdRequest):
    return ExtractPlaceIdResponse(place_id=extract_place_id(request.url))

@router.get("/cache/info", response_model=CacheInfo)
async def cache_info_endpoint(service: PlaceDetailsService = Depends(get_place_details_service)):
    return service.cache.cache_info()

@router.delete("/cache/places/{place_id}")
async def clear_place_cache_endpoint(
    place_id: str,
    service: PlaceDetailsService = Depends(get_place_details_service)
):
    if not service.cache.clear_place(place_id):
        raise HTTPException(status_code=500, detail=f"Failed to clear cache for {place_id}")
    return {"status": "cleared", "place_id": place_id}
