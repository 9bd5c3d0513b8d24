from abc import ABC, abstractmethod
from typing import Optional


class BasePlacesStore(ABC):
    """
    Remote document store holding the last known good record per place.
    Documents are plain dicts shaped like PlaceRecord.model_dump().
    """

    @abstractmethod
    async def get_place(self, place_id: str) -> Optional[dict]:
        """Returns the stored record for place_id, or None if there is none."""

    @abstractmethod
    async def upsert_place(self, place_id: str, record: dict) -> None:
        """Inserts or fully replaces the stored record for place_id."""
