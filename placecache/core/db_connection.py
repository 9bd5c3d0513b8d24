from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from placecache.core.config import settings
from placecache.core.logger import logs
import logging

class AsyncDBConnection:
    """
    Owns the single motor client behind the MongoDB remote place store.
    The client is created on first use so local mode never touches the driver.
    """
    _client: AsyncIOMotorClient | None = None

    @classmethod
    def _connect(cls) -> AsyncIOMotorClient:
        if cls._client is None:
            # Fallback reads must fail fast when the server is down
            cls._client = AsyncIOMotorClient(
                settings.MONGO_URI,
                serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS
            )
            logs.log(logging.INFO, f"MongoDB client created for database '{settings.MONGO_DB_NAME}'")
        return cls._client

    def get_database(self) -> AsyncIOMotorDatabase:
        if settings.STORAGE_MODE != "mongodb":
            raise RuntimeError(f"MongoDB not available - STORAGE_MODE is '{settings.STORAGE_MODE}'")
        return self._connect()[settings.MONGO_DB_NAME]

    @classmethod
    def close(cls):
        """Close the client if one was ever opened."""
        if cls._client is not None:
            cls._client.close()
            cls._client = None
            logs.log(logging.INFO, "MongoDB client closed")

db_connection = AsyncDBConnection()

def get_db() -> AsyncIOMotorDatabase:
    return db_connection.get_database()
