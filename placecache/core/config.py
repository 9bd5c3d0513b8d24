from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Remote document store: "mongodb" or "local"
    STORAGE_MODE: str = "local"

    # MongoDB Configuration (only needed if STORAGE_MODE=mongodb)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "placecache_db"
    PLACES_COLLECTION: str = "places"
    MONGO_TIMEOUT_MS: int = 5000

    # Local JSON document store (only used if STORAGE_MODE=local)
    LOCAL_STORE_DIR: str = "data/places"

    # Persistent key-value cache directory
    CACHE_DIR: str = "data/cache"

    LOGGER: int = 20
    LOG_DIRECTORY: str = "logs"
    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    # Google Places Configuration
    GOOGLE_MAPS_API_KEY: str = "your-key-here"
    PLACES_DETAILS_URL: str = "https://maps.googleapis.com/maps/api/place/details/json"
    PLACES_PHOTO_URL: str = "https://maps.googleapis.com/maps/api/place/photo"
    PROVIDER_TIMEOUT_SECONDS: float = 10.0

    # Cache namespace. Bump CACHE_VERSION to purge every cached place.
    CACHE_VERSION: str = "1.0"
    CACHE_PREFIX: str = "placecache_place_"
    CACHE_VERSION_KEY: str = "placecache_cache_version"

    # Freshness windows
    DATA_TTL_HOURS: float = 24
    PHOTO_TTL_DAYS: float = 3
    AGING_THRESHOLD_HOURS: float = 6
    MAX_PHOTOS: int = 10

    # Background refresh delays
    AGING_REFRESH_DELAY_SECONDS: float = 1.0
    PHOTO_REFRESH_DELAY_SECONDS: float = 0.5

    # Background refresh throttling, per place
    MIN_REFRESH_INTERVAL_SECONDS: float = 30
    MAX_REFRESHES_PER_HOUR: int = 10

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def data_ttl_ms(self) -> int:
        return int(self.DATA_TTL_HOURS * 60 * 60 * 1000)

    @property
    def photo_ttl_ms(self) -> int:
        return int(self.PHOTO_TTL_DAYS * 24 * 60 * 60 * 1000)

    @property
    def aging_threshold_ms(self) -> int:
        return int(self.AGING_THRESHOLD_HOURS * 60 * 60 * 1000)

settings = Settings()
