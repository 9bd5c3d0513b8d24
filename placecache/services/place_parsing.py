"""
Turns raw provider results into PlaceRecord objects and resolves photo URLs.
"""
import asyncio
import logging
import re
from typing import Iterable, List, Optional

from placecache.core.errors import PhotoResolutionFailure
from placecache.core.logger import logs
from placecache.models.places_model import PlaceRecord, PlaceReview
from placecache.services.freshness import format_last_fetched
from placecache.services.places_provider import BasePlacesProvider

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
HOURS_PATTERN = re.compile(r"^(%s):\s*(.+)$" % "|".join(WEEKDAYS))

# Size constraints tried in order for every photo
PHOTO_SIZE_ATTEMPTS = [
    {"max_width": 800, "max_height": 600},
    {"max_width": 400},
]


def parse_opening_hours(lines: Optional[Iterable[str]]) -> dict[str, str]:
    """Parse "<Day>: <Hours>" lines into {day: hours}. Anything else is skipped."""
    hours = {}
    for line in lines or []:
        if not isinstance(line, str):
            continue
        match = HOURS_PATTERN.match(line.strip())
        if match:
            hours[match.group(1)] = match.group(2).strip()
    return hours


def _parse_reviews(raw_reviews) -> List[PlaceReview]:
    reviews = []
    for raw in raw_reviews or []:
        if not isinstance(raw, dict):
            continue
        reviews.append(PlaceReview(
            author_name=raw.get("author_name"),
            rating=raw.get("rating"),
            text=raw.get("text"),
            time=raw.get("time"),
            relative_time_description=raw.get("relative_time_description")
        ))
    return reviews


def build_place_record(place_id: str, result: dict, fetched_at_ms: int) -> PlaceRecord:
    """Map a Places Details `result` object onto a PlaceRecord stamped with fetched_at_ms."""
    opening_hours = result.get("opening_hours") or {}
    photo_references = [
        photo["photo_reference"]
        for photo in result.get("photos") or []
        if isinstance(photo, dict) and photo.get("photo_reference")
    ]

    return PlaceRecord(
        place_id=place_id,
        name=result.get("name"),
        address=result.get("formatted_address"),
        rating=result.get("rating"),
        user_ratings_total=result.get("user_ratings_total"),
        phone=result.get("formatted_phone_number"),
        website=result.get("website"),
        hours=parse_opening_hours(opening_hours.get("weekday_text")),
        photo_references=photo_references,
        reviews=_parse_reviews(result.get("reviews")),
        last_fetched=format_last_fetched(fetched_at_ms)
    )


async def _resolve_one(provider: BasePlacesProvider, reference: str) -> Optional[str]:
    for size in PHOTO_SIZE_ATTEMPTS:
        try:
            url = await provider.resolve_photo_url(reference, **size)
            if url:
                return url
        except PhotoResolutionFailure as e:
            logs.log(logging.DEBUG, f"Photo size {size} failed for {reference[:12]}...: {e.message}")
        except Exception as e:
            logs.log(logging.DEBUG, f"Photo size {size} errored for {reference[:12]}...: {str(e)}")

    logs.log(logging.WARNING, f"Dropping photo {reference[:12]}...: no size could be resolved")
    return None


async def resolve_photo_urls(
    provider: BasePlacesProvider, references: List[str], max_photos: int = 10
) -> List[str]:
    """Resolve up to max_photos references, keeping order and dropping failures."""
    selected = references[:max_photos]
    if not selected:
        return []
    resolved = await asyncio.gather(*(_resolve_one(provider, ref) for ref in selected))
    return [url for url in resolved if url]
