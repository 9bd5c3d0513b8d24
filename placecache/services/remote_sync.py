import logging

from placecache.core.background import BackgroundTaskScheduler
from placecache.core.logger import logs
from placecache.models.places_model import PlaceRecord
from placecache.repos.base_repo import BasePlacesStore


class RemoteSyncWriter:
    """
    Pushes freshly fetched records to the remote document store in the background.
    Failures are logged and dropped; nothing is retried and nothing reaches the caller.
    """

    def __init__(self, store: BasePlacesStore, scheduler: BackgroundTaskScheduler, delay: float = 0.0):
        self.store = store
        self.scheduler = scheduler
        self.delay = delay

    def sync_to_remote_store(self, place_id: str, record: PlaceRecord) -> None:
        document = record.model_dump(mode="json")

        async def _upsert():
            await self._write(place_id, document)

        self.scheduler.schedule(_upsert, delay=self.delay, name=f"remote-sync:{place_id}")

    async def _write(self, place_id: str, document: dict) -> None:
        try:
            await self.store.upsert_place(place_id, document)
        except Exception as e:
            logs.log(logging.ERROR, f"Remote sync failed for {place_id}: {str(e)}")
            return

        logs.log(logging.INFO, f"Synced place {place_id} to remote store")
