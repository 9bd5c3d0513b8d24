"""
Live place-details providers.
Supports the Google Places Details API behind a small provider interface so the
fetch layer can be tested against fakes.
"""
import httpx
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from placecache.core.config import Settings, settings as default_settings
from placecache.core.errors import PhotoResolutionFailure, ProviderFailure
from placecache.core.logger import logs

DETAIL_FIELDS = [
    "place_id",
    "name",
    "formatted_address",
    "formatted_phone_number",
    "website",
    "opening_hours",
    "rating",
    "user_ratings_total",
    "reviews",
    "photos",
]


@dataclass
class ProviderResult:
    """Record-or-status answer from a provider"""
    status: str
    result: Optional[dict] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "OK" and self.result is not None


class BasePlacesProvider(ABC):
    """Base class for all live place providers"""

    @abstractmethod
    async def get_details(self, place_id: str, fields: list[str]) -> ProviderResult:
        """Fetch details for place_id restricted to fields"""
        pass

    @abstractmethod
    async def resolve_photo_url(
        self, reference: str, max_width: Optional[int] = None, max_height: Optional[int] = None
    ) -> str:
        """Turn a raw photo reference into a directly renderable URL"""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the name of the provider"""
        pass


class GooglePlacesProvider(BasePlacesProvider):
    """Google Places Details API Provider"""

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config or default_settings
        self.api_key = self.config.GOOGLE_MAPS_API_KEY
        self.details_url = self.config.PLACES_DETAILS_URL
        self.photo_url = self.config.PLACES_PHOTO_URL
        self.timeout = self.config.PROVIDER_TIMEOUT_SECONDS
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport, timeout=self.timeout)

    async def get_details(self, place_id: str, fields: list[str]) -> ProviderResult:
        params = {
            "place_id": place_id,
            "fields": ",".join(fields),
            "key": self.api_key
        }

        async with self._client() as client:
            try:
                response = await client.get(self.details_url, params=params)
            except httpx.HTTPError as e:
                logs.log(logging.ERROR, f"Google Places request failed for {place_id}: {str(e)}")
                raise ProviderFailure(f"Google Places unreachable: {str(e)}", place_id)

        if response.status_code != 200:
            return ProviderResult(
                status=f"HTTP_{response.status_code}",
                error_message=response.reason_phrase
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderFailure(f"Google Places returned invalid JSON: {str(e)}", place_id)

        return ProviderResult(
            status=data.get("status", "UNKNOWN_ERROR"),
            result=data.get("result"),
            error_message=data.get("error_message")
        )

    async def resolve_photo_url(
        self, reference: str, max_width: Optional[int] = None, max_height: Optional[int] = None
    ) -> str:
        params = {"photoreference": reference, "key": self.api_key}
        if max_width:
            params["maxwidth"] = max_width
        if max_height:
            params["maxheight"] = max_height

        async with self._client() as client:
            try:
                # The photo endpoint redirects to the image host, that target is what we keep
                response = await client.get(self.photo_url, params=params, follow_redirects=False)
            except httpx.HTTPError as e:
                raise PhotoResolutionFailure(f"Photo request failed: {str(e)}")

        if response.is_redirect and response.headers.get("location"):
            return response.headers["location"]
        if response.status_code == 200:
            return str(response.url)
        raise PhotoResolutionFailure(f"Photo endpoint returned {response.status_code}")

    def get_provider_name(self) -> str:
        return "Google Places"
