"""
Local file-based document store for place records.
Uses JSON files instead of MongoDB (STORAGE_MODE=local).
"""
import json
import logging
from datetime import datetime, timezone
from hashlib import sha1
from pathlib import Path
from typing import Optional

from placecache.core.errors import RemoteStoreFailure
from placecache.core.logger import logs
from placecache.repos.base_repo import BasePlacesStore


class LocalPlacesRepository(BasePlacesStore):
    """Repository for storing place records in local JSON files."""

    def __init__(self, base_dir: str = "data/places"):
        """Initialize local storage directory."""
        self.base_dir = Path(base_dir)

        # Create directory if it doesn't exist
        self.base_dir.mkdir(parents=True, exist_ok=True)

        logs.log(logging.INFO, f"Local place store initialized at {self.base_dir}")

    def _get_place_file(self, place_id: str) -> Path:
        """Get the file path for a place document."""
        # Sanitize place id for filename, suffix keeps distinct ids distinct
        safe_id = place_id.replace(":", "_").replace("/", "_")
        digest = sha1(place_id.encode("utf-8")).hexdigest()[:8]
        return self.base_dir / f"{safe_id}.{digest}.json"

    async def get_place(self, place_id: str) -> Optional[dict]:
        """Retrieve a place record from local file."""
        place_file = self._get_place_file(place_id)

        if not place_file.exists():
            return None

        try:
            with open(place_file, 'r', encoding="utf-8") as f:
                doc = json.load(f)
        except (OSError, ValueError) as e:
            raise RemoteStoreFailure(f"Failed to read place {place_id}: {str(e)}", place_id)

        if not isinstance(doc, dict) or doc.get("place_id") != place_id:
            raise RemoteStoreFailure(f"Stored document does not belong to place {place_id}", place_id)

        return doc.get("data") or None

    async def upsert_place(self, place_id: str, record: dict) -> None:
        """Write a place record to local file, replacing any previous one."""
        doc = {
            "place_id": place_id,
            "data": record,
            "updated_at": datetime.now(timezone.utc).isoformat()
        }

        try:
            with open(self._get_place_file(place_id), 'w', encoding="utf-8") as f:
                json.dump(doc, f, indent=2)
        except (OSError, TypeError) as e:
            raise RemoteStoreFailure(f"Failed to write place {place_id}: {str(e)}", place_id)
