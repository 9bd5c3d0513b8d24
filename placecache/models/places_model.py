from pydantic import BaseModel, Field
from typing import Dict, List, Optional

class PlaceReview(BaseModel):
    author_name: Optional[str] = None
    rating: Optional[float] = None
    text: Optional[str] = None
    time: Optional[int] = None  # Epoch seconds
    relative_time_description: Optional[str] = None

class PlaceRecord(BaseModel):
    place_id: str
    name: Optional[str] = None
    address: Optional[str] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    hours: Dict[str, str] = Field(default_factory=dict)  # Day name -> hours text
    photo_references: List[str] = Field(default_factory=list)  # Raw provider handles
    photo_urls: List[str] = Field(default_factory=list)  # Resolved, expire after PHOTO_TTL
    reviews: List[PlaceReview] = Field(default_factory=list)
    last_fetched: Optional[str] = None  # ISO-8601, set by the fetch layer only

class CacheEntry(BaseModel):
    place_id: str
    data: PlaceRecord
    timestamp: int  # Epoch milliseconds of the write
    photo_urls: List[str] = Field(default_factory=list)

class CacheInfo(BaseModel):
    entry_count: int = 0
    cache_version: Optional[str] = None
    estimated_size_bytes: int = 0

# --- API Request/Response Models ---
class PhotoFreshnessRequest(BaseModel):
    place_id: str
    record: Optional[PlaceRecord] = None

class PhotoFreshnessResponse(BaseModel):
    place_id: str
    should_refresh: bool

class ExtractPlaceIdRequest(BaseModel):
    url: str

class ExtractPlaceIdResponse(BaseModel):
    place_id: Optional[str] = None
