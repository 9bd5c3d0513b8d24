"""Tests for services/places_provider.py using httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from placecache.core.errors import PhotoResolutionFailure, ProviderFailure
from placecache.services.places_provider import DETAIL_FIELDS, GooglePlacesProvider


def make_provider(test_settings, handler):
    return GooglePlacesProvider(test_settings, transport=httpx.MockTransport(handler))


class TestGetDetails:
    @pytest.mark.asyncio
    async def test_ok_result(self, test_settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"status": "OK", "result": {"name": "Park"}})

        result = await make_provider(test_settings, handler).get_details("p1", DETAIL_FIELDS)

        assert result.ok
        assert result.result == {"name": "Park"}
        assert seen["params"]["place_id"] == "p1"
        assert seen["params"]["key"] == "test-key"
        assert seen["params"]["fields"].split(",") == DETAIL_FIELDS

    @pytest.mark.asyncio
    async def test_api_status_is_reported(self, test_settings):
        def handler(request):
            return httpx.Response(200, json={"status": "NOT_FOUND", "error_message": "gone"})

        result = await make_provider(test_settings, handler).get_details("p1", DETAIL_FIELDS)

        assert not result.ok
        assert result.status == "NOT_FOUND"
        assert result.error_message == "gone"

    @pytest.mark.asyncio
    async def test_http_error_status(self, test_settings):
        result = await make_provider(
            test_settings, lambda request: httpx.Response(503)
        ).get_details("p1", DETAIL_FIELDS)

        assert not result.ok
        assert result.status == "HTTP_503"

    @pytest.mark.asyncio
    async def test_transport_error_raises_provider_failure(self, test_settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderFailure):
            await make_provider(test_settings, handler).get_details("p1", DETAIL_FIELDS)

    @pytest.mark.asyncio
    async def test_invalid_json_raises_provider_failure(self, test_settings):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        with pytest.raises(ProviderFailure):
            await make_provider(test_settings, handler).get_details("p1", DETAIL_FIELDS)


class TestResolvePhoto:
    @pytest.mark.asyncio
    async def test_redirect_target_is_returned(self, test_settings):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(302, headers={"location": "https://lh3.example/photo.jpg"})

        url = await make_provider(test_settings, handler).resolve_photo_url("ref", 800, 600)

        assert url == "https://lh3.example/photo.jpg"
        assert seen["params"]["maxwidth"] == "800"
        assert seen["params"]["maxheight"] == "600"
        assert seen["params"]["photoreference"] == "ref"

    @pytest.mark.asyncio
    async def test_only_width(self, test_settings):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(302, headers={"location": "https://lh3.example/small.jpg"})

        await make_provider(test_settings, handler).resolve_photo_url("ref", max_width=400)
        assert "maxheight" not in seen["params"]

    @pytest.mark.asyncio
    async def test_error_status_raises(self, test_settings):
        with pytest.raises(PhotoResolutionFailure):
            await make_provider(
                test_settings, lambda request: httpx.Response(400)
            ).resolve_photo_url("ref", 800)

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, test_settings):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(PhotoResolutionFailure):
            await make_provider(test_settings, handler).resolve_photo_url("ref", 800)
