from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime, timezone
from typing import Optional

from pymongo.errors import PyMongoError

from placecache.core.errors import RemoteStoreFailure
from placecache.repos.base_repo import BasePlacesStore

class PlacesRepository(BasePlacesStore):
    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "places"):
        self.collection = db[collection_name]

    async def get_place(self, place_id: str) -> Optional[dict]:
        """
        Looks up the last synced record for a place.
        """
        try:
            doc = await self.collection.find_one({"place_id": place_id}, {"_id": 0})
        except PyMongoError as e:
            raise RemoteStoreFailure(f"MongoDB read failed: {str(e)}", place_id)

        if not doc or not doc.get("data"):
            return None
        return doc["data"]

    async def upsert_place(self, place_id: str, record: dict) -> None:
        """
        Upserts the place record, replacing whatever was stored before.
        """
        try:
            await self.collection.update_one(
                {"place_id": place_id},
                {"$set": {"data": record, "updated_at": datetime.now(timezone.utc)}},
                upsert=True
            )
        except PyMongoError as e:
            raise RemoteStoreFailure(f"MongoDB upsert failed: {str(e)}", place_id)
