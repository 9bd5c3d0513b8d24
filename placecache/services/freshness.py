"""
Freshness checks for cached places.
Record data and photo URLs age independently: data by the entry's write
timestamp, photos by the record's own last_fetched.
"""
import time
from datetime import datetime, timezone
from typing import Optional

from placecache.core.config import Settings, settings as default_settings
from placecache.models.places_model import CacheEntry, PlaceRecord


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_last_fetched(value: str) -> int:
    """ISO-8601 timestamp to epoch milliseconds. Naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def format_last_fetched(epoch_ms: int) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).isoformat()


def is_data_stale(
    entry: CacheEntry, now: Optional[int] = None, config: Optional[Settings] = None
) -> bool:
    config = config or default_settings
    now = now_ms() if now is None else now
    return now - entry.timestamp > config.data_ttl_ms


def is_aging(
    entry: CacheEntry, now: Optional[int] = None, config: Optional[Settings] = None
) -> bool:
    """Old enough to warrant a background refresh, not old enough to refetch inline."""
    config = config or default_settings
    now = now_ms() if now is None else now
    return now - entry.timestamp > config.aging_threshold_ms


def should_refresh_photos(
    record: Optional[PlaceRecord], now: Optional[int] = None, config: Optional[Settings] = None
) -> bool:
    """True when photo URLs may have expired. Unknown or unparseable ages count as expired."""
    config = config or default_settings
    if record is None or not record.last_fetched:
        return True

    try:
        fetched_at = parse_last_fetched(record.last_fetched)
    except (ValueError, TypeError, OverflowError):
        return True

    now = now_ms() if now is None else now
    return now - fetched_at > config.photo_ttl_ms
